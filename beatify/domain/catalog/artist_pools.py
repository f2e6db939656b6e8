"""Static artist pools backing mood curation and the artist showcase."""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Tuple

from beatify.models.dto import ArtistCategory


PUNJABI_ARTISTS: Tuple[str, ...] = (
    'Karan Aujla',
    'Talha Anjum',
    'Talhah Yunus',
    'Young Stunners',
    'Sidhu Moose Wala',
    'AP Dhillon',
    'Diljit Dosanjh',
    'Shubh',
    'Arjan Dhillon',
    'Gurinder Gill',
    'Prabh Deep',
    'Raf Saperra',
    'Amrit Maan',
    'Ammy Virk',
    'Babbu Maan',
    'Jass Manak',
    'Guru Randhawa',
    'Harrdy Sandhu',
    'B Praak',
    'Jassa Dhillon',
    'Sharry Mann',
    'Gurnam Bhullar',
    'Jordan Sandhu',
    'Garry Sandhu',
    'Tarsem Jassar',
    'Ranjit Bawa',
    'R Nait',
    'Nimrat Khaira',
    'Jasmine Sandlas',
    'Sunanda Sharma',
    'Afsana Khan',
    'Gippy Grewal',
    'Mankirt Aulakh',
    'Kulwinder Billa',
    'Satinder Sartaaj',
    'Jazzy B',
    'Gurdas Maan',
    'Dilpreet Dhillon',
    'Sukh-E Muzical Doctorz',
    'Bohemia',
    'Imran Khan',
    'Badshah',
    'Yo Yo Honey Singh',
    'Sultaan',
    'Cheema Y',
    'Gur Sidhu',
    'Jerry',
    'Nirvair Pannu',
    'Himmat Sandhu',
    'Veer Davinder',
)

ENGLISH_ARTISTS: Tuple[str, ...] = (
    'Taylor Swift',
    'Drake',
    'The Weeknd',
    'Ed Sheeran',
    'Billie Eilish',
    'Dua Lipa',
    'Justin Bieber',
    'Ariana Grande',
    'Post Malone',
    'Imagine Dragons',
    'Travis Scott',
    'Olivia Rodrigo',
    'SZA',
    'Doja Cat',
    'Harry Styles',
    'Bruno Mars',
    'Kendrick Lamar',
    'Lana Del Rey',
    'Rihanna',
    'Eminem',
    'Coldplay',
    'Sabrina Carpenter',
    'Miley Cyrus',
    'Lady Gaga',
    'Beyonce',
    'Kanye West',
    'Future',
    'Metro Boomin',
    '21 Savage',
    'Lil Baby',
    'Morgan Wallen',
    'Zach Bryan',
    'Sam Smith',
    'Shawn Mendes',
    'Charlie Puth',
    'Selena Gomez',
    'Maroon 5',
    'OneRepublic',
    'Arctic Monkeys',
    'Hozier',
    'Tate McRae',
    'Khalid',
    'Halsey',
    'Lizzo',
    'Jack Harlow',
    'Lil Nas X',
    'Chappell Roan',
    'Benson Boone',
    'Teddy Swims',
    'Noah Kahan',
)

GLOBAL_ARTISTS: Tuple[str, ...] = (
    'Bad Bunny',
    'BTS',
    'BLACKPINK',
    'Karol G',
    'J Balvin',
    'Calvin Harris',
    'Shakira',
    'David Guetta',
    'Rema',
    'Ayra Starr',
    'Martin Garrix',
    'Major Lazer',
    'Burna Boy',
    'Wizkid',
    'Tems',
    'Davido',
    'Peso Pluma',
    'Feid',
    'Rauw Alejandro',
    'Anitta',
    'Rosalia',
    'Ozuna',
    'Daddy Yankee',
    'Maluma',
    'Sebastian Yatra',
    'Stray Kids',
    'NewJeans',
    'TWICE',
    'SEVENTEEN',
    'Jung Kook',
    'Avicii',
    'Kygo',
    'Alan Walker',
    'Marshmello',
    'Tiesto',
    'Swedish House Mafia',
    'Stromae',
    'Aya Nakamura',
    'Arijit Singh',
    'A. R. Rahman',
    'Tame Impala',
    'Daft Punk',
    'Fred again..',
    'Robin Schulz',
    'Manu Chao',
    'Angele',
    'Bizarrap',
    'Tyla',
    'Fireboy DML',
    'Asake',
)


class CategoryConfig(NamedTuple):
    category: ArtistCategory
    title: str
    description: str
    pool: Tuple[str, ...]
    market: str


CATEGORY_CONFIGS: Tuple[CategoryConfig, ...] = (
    CategoryConfig(
        ArtistCategory.PUNJABI,
        'Punjabi Powerhouses',
        'High-energy voices and heartfelt ballads from Punjabi superstars.',
        PUNJABI_ARTISTS,
        'IN',
    ),
    CategoryConfig(
        ArtistCategory.ENGLISH,
        'Global Chart Leaders',
        'International chart-toppers shaping the sound of pop and hip-hop.',
        ENGLISH_ARTISTS,
        'US',
    ),
    CategoryConfig(
        ArtistCategory.GLOBAL,
        'Worldwide Vibes',
        'Genre-bending icons bringing fresh sounds from every corner of the globe.',
        GLOBAL_ARTISTS,
        'US',
    ),
)

_BY_CATEGORY: Dict[ArtistCategory, CategoryConfig] = {cfg.category: cfg for cfg in CATEGORY_CONFIGS}

DEFAULT_MARKET = 'US'
# Genre keywords that mark an artist looked up by id as Punjabi
REGIONAL_GENRE_KEYWORDS = ('punjabi', 'bhangra')


def category_config(category: ArtistCategory) -> CategoryConfig:
    return _BY_CATEGORY[ArtistCategory(category)]


def market_for(category: Optional[ArtistCategory]) -> str:
    if category is None:
        return DEFAULT_MARKET
    return category_config(category).market


def pools() -> Dict[ArtistCategory, List[str]]:
    """Fresh, mutable copies of every pool in category order."""
    return {cfg.category: list(cfg.pool) for cfg in CATEGORY_CONFIGS}


def category_of(name: str) -> ArtistCategory:
    """Category of a pool member; names outside every pool count as global."""
    key = name.lower()
    for cfg in CATEGORY_CONFIGS:
        if any(member.lower() == key for member in cfg.pool):
            return cfg.category
    return ArtistCategory.GLOBAL


def infer_category_from_genres(genres) -> ArtistCategory:
    for genre in genres or []:
        lowered = str(genre).lower()
        if any(keyword in lowered for keyword in REGIONAL_GENRE_KEYWORDS):
            return ArtistCategory.PUNJABI
    return ArtistCategory.ENGLISH


__all__ = [
    "PUNJABI_ARTISTS",
    "ENGLISH_ARTISTS",
    "GLOBAL_ARTISTS",
    "CategoryConfig",
    "CATEGORY_CONFIGS",
    "DEFAULT_MARKET",
    "category_config",
    "market_for",
    "pools",
    "category_of",
    "infer_category_from_genres",
]
