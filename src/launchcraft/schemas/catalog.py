"""Static field catalog shared by validation, prompt assembly and the CLI."""

from enum import Enum
from typing import Optional


class AppCategory(str, Enum):
    """App Store primary categories."""

    GAMES = "games"
    BUSINESS = "business"
    EDUCATION = "education"
    ENTERTAINMENT = "entertainment"
    FINANCE = "finance"
    HEALTH_FITNESS = "health_fitness"
    LIFESTYLE = "lifestyle"
    MEDICAL = "medical"
    MUSIC = "music"
    NEWS = "news"
    PHOTO_VIDEO = "photo_video"
    PRODUCTIVITY = "productivity"
    REFERENCE = "reference"
    SHOPPING = "shopping"
    SOCIAL_NETWORKING = "social_networking"
    SPORTS = "sports"
    TRAVEL = "travel"
    UTILITIES = "utilities"
    WEATHER = "weather"
    OTHER = "other"


class BrandTone(str, Enum):
    """Voice the generated copy should be written in."""

    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    PLAYFUL = "playful"
    INNOVATIVE = "innovative"
    TRUSTWORTHY = "trustworthy"
    YOUTHFUL = "youthful"
    SOPHISTICATED = "sophisticated"
    CASUAL = "casual"


class Gender(str, Enum):
    ALL = "all"
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PricingModel(str, Enum):
    FREE = "free"
    PAID = "paid"
    FREEMIUM = "freemium"
    SUBSCRIPTION = "subscription"


CATEGORY_LABELS: dict[AppCategory, str] = {
    AppCategory.GAMES: "遊戲",
    AppCategory.BUSINESS: "商業",
    AppCategory.EDUCATION: "教育",
    AppCategory.ENTERTAINMENT: "娛樂",
    AppCategory.FINANCE: "財務",
    AppCategory.HEALTH_FITNESS: "健康與健身",
    AppCategory.LIFESTYLE: "生活風格",
    AppCategory.MEDICAL: "醫療",
    AppCategory.MUSIC: "音樂",
    AppCategory.NEWS: "新聞",
    AppCategory.PHOTO_VIDEO: "照片與影片",
    AppCategory.PRODUCTIVITY: "生產力工具",
    AppCategory.REFERENCE: "參考資料",
    AppCategory.SHOPPING: "購物",
    AppCategory.SOCIAL_NETWORKING: "社交",
    AppCategory.SPORTS: "運動",
    AppCategory.TRAVEL: "旅遊",
    AppCategory.UTILITIES: "工具程式",
    AppCategory.WEATHER: "天氣",
    AppCategory.OTHER: "其他",
}

# (label, short style description) per tone
BRAND_TONE_LABELS: dict[BrandTone, tuple[str, str]] = {
    BrandTone.PROFESSIONAL: ("專業", "正式、可靠、權威"),
    BrandTone.FRIENDLY: ("友善", "親切、溫暖、易近"),
    BrandTone.PLAYFUL: ("活潑", "有趣、輕鬆、娛樂"),
    BrandTone.INNOVATIVE: ("創新", "前衛、科技、突破"),
    BrandTone.TRUSTWORTHY: ("可信", "安全、穩定、誠實"),
    BrandTone.YOUTHFUL: ("年輕", "活力、潮流、新鮮"),
    BrandTone.SOPHISTICATED: ("精緻", "優雅、高端、品味"),
    BrandTone.CASUAL: ("休閒", "隨性、自在、日常"),
}

AGE_RANGES: dict[str, str] = {
    "4-12": "兒童 (4-12)",
    "13-17": "青少年 (13-17)",
    "18-24": "年輕成人 (18-24)",
    "25-34": "成人 (25-34)",
    "35-44": "中年 (35-44)",
    "45-54": "中高年 (45-54)",
    "55+": "年長者 (55+)",
    "all": "所有年齡",
}

INTERESTS: dict[str, str] = {
    "科技": "technology",
    "遊戲": "gaming",
    "運動": "sports",
    "健身": "fitness",
    "音樂": "music",
    "電影": "movies",
    "閱讀": "reading",
    "旅遊": "travel",
    "美食": "food",
    "攝影": "photography",
    "藝術": "art",
    "時尚": "fashion",
    "教育": "education",
    "商業": "business",
    "投資": "investing",
    "健康": "health",
    "家庭": "family",
    "寵物": "pets",
    "環保": "environment",
    "社交": "social",
}

# English slug -> interest value
INTEREST_ALIASES: dict[str, str] = {alias: value for value, alias in INTERESTS.items()}


def canonical_interest(interest: str) -> Optional[str]:
    """Return the catalog value for an interest or its English alias, or None if unknown."""
    if interest in INTERESTS:
        return interest
    return INTEREST_ALIASES.get(interest.strip().lower())


PRICING_MODEL_LABELS: dict[PricingModel, tuple[str, str]] = {
    PricingModel.FREE: ("免費", "完全免費使用"),
    PricingModel.PAID: ("付費", "一次性購買"),
    PricingModel.FREEMIUM: ("免費增值", "基礎免費，進階付費"),
    PricingModel.SUBSCRIPTION: ("訂閱制", "週期性付費"),
}


def catalog_as_dict() -> dict[str, list[dict[str, str]]]:
    """Return every picklist as plain data (used by the CLI `catalog` command)."""
    return {
        "categories": [
            {"value": category.value, "label": label}
            for category, label in CATEGORY_LABELS.items()
        ],
        "brandTones": [
            {"value": tone.value, "label": label, "description": description}
            for tone, (label, description) in BRAND_TONE_LABELS.items()
        ],
        "ageRanges": [{"value": value, "label": label} for value, label in AGE_RANGES.items()],
        "genders": [{"value": gender.value, "label": gender.value} for gender in Gender],
        "interests": [
            {"value": value, "label": value, "alias": alias} for value, alias in INTERESTS.items()
        ],
        "pricingModels": [
            {"value": model.value, "label": label, "description": description}
            for model, (label, description) in PRICING_MODEL_LABELS.items()
        ],
    }
