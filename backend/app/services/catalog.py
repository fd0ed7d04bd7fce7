"""Fixed choices offered by the record forms."""

SERVICE_TYPES: list[str] = [
    "Standard Haircut",
    "Premium/Celebrity Haircut",
    "Children/Student Haircut",
    "Beard Trim & Shaping",
    "Mustache Grooming",
    "Straight Razor Hot Shave",
    "Hair Dye & Tinting (Black/Colors)",
    "Beard Dye/Gray Blending",
    "Dreadlocks (Fixing & Relocking)",
    "Scalp Massage & Treatment",
    "Hair Washing & Setting",
    "Relaxer & Texturizer Application",
    "Facial Therapy (Plain or Fruit Facials)",
    "Manicure & Pedicure",
    "Home Service Barbing",
    "Ear & Nose Hair Trimming",
    "Eyebrow Shaping/Threading",
    "Bumps Treatment (Aftershave/Creme)",
    "Toupee/Hair Replacement Installation",
    "Braiding for Men (Cornrows/Twists)",
]

EXPENSE_CATEGORIES: list[str] = [
    "supplies",
    "utilities",
    "maintenance",
    "fuel",
    "electricity",
    "other",
]

PAYMENT_METHODS: dict[str, str] = {
    "cash": "Cash",
    "card": "Card",
    "transfer": "Mobile Transfer",
}


def normalize_service_type(value: str) -> str | None:
    """Return the catalog spelling of a service type, None if unknown."""
    wanted = value.strip().lower()
    for service in SERVICE_TYPES:
        if service.lower() == wanted:
            return service
    return None


def normalize_expense_category(value: str) -> str | None:
    wanted = value.strip().lower()
    return wanted if wanted in EXPENSE_CATEGORIES else None


def normalize_payment_method(value: str) -> str | None:
    wanted = value.strip().lower()
    return wanted if wanted in PAYMENT_METHODS else None
