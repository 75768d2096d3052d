"""Closed vocabularies offered by the songwriting UI."""

GENRES = [
    "J-Pop",
    "Rock",
    "Pop",
    "Ballad",
    "City Pop",
    "Anime Song",
    "Vocaloid",
    "Hip Hop",
    "R&B",
    "EDM",
    "Future Bass",
    "Lo-fi",
    "Jazz",
    "Funk",
    "Metal",
    "Punk",
    "Folk",
    "Enka",
    "Acoustic",
    "Orchestral",
]

VOCAL_TEXTURES = [
    "Breathy",
    "Husky",
    "Clear",
    "Powerful",
    "Whisper",
    "Falsetto",
    "Raspy",
    "Sweet",
    "Soulful",
    "Nasal",
]

EMPHASIS_INSTRUMENTS = [
    "Piano",
    "Acoustic Guitar",
    "Electric Guitar",
    "Bass",
    "Drums",
    "Synthesizer",
    "Strings",
    "Brass",
    "Saxophone",
    "Violin",
    "Shamisen",
    "Koto",
    "808",
]

# Features that can be switched off through LYRICSMITH_DISABLED_FEATURES.
FEATURES = frozenset({"vocal_audio", "visual_prompts", "video_prompts", "image", "voice"})
