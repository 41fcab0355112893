"""
Recipe tag vocabulary.

Tags are stored as stable ids ("gluten_free"); labels and aliases in
English, Russian and Spanish all resolve to the same id. Anything that does
not resolve is not a tag.
"""

import re
import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class TagOption:
    id: str
    labels: dict[str, str]
    aliases: tuple[str, ...] = ()


RECIPE_TAG_OPTIONS: tuple[TagOption, ...] = (
    TagOption("vegan", {"en": "Vegan", "ru": "Веган", "es": "Vegano"}, ("веган", "vegano")),
    TagOption("vegetarian", {"en": "Vegetarian", "ru": "Вегетарианский", "es": "Vegetariano"}, ("вегетарианский", "vegetariano")),
    TagOption("gluten_free", {"en": "Gluten free", "ru": "Без глютена", "es": "Sin gluten"}, ("без глютена", "sin gluten")),
    TagOption("lactose_free", {"en": "Lactose free", "ru": "Без лактозы", "es": "Sin lactosa"}, ("без лактозы", "sin lactosa")),
    TagOption("healthy", {"en": "Healthy", "ru": "ПП", "es": "Saludable"}, ("пп", "healthy", "saludable")),
    TagOption("breakfast", {"en": "Breakfast", "ru": "Завтрак", "es": "Desayuno"}, ("завтрак", "breakfast", "desayuno")),
    TagOption("lunch", {"en": "Lunch", "ru": "Обед", "es": "Almuerzo"}, ("обед", "lunch", "almuerzo", "comida")),
    TagOption("dinner", {"en": "Dinner", "ru": "Ужин", "es": "Cena"}, ("ужин", "dinner", "cena")),
    TagOption("snack", {"en": "Snack", "ru": "Перекус", "es": "Snack"}, ("перекус", "snack")),
    TagOption("dessert", {"en": "Dessert", "ru": "Десерт", "es": "Postre"}, ("десерт", "dessert", "postre")),
    TagOption("baking", {"en": "Baking", "ru": "Выпечка", "es": "Horneado"}, ("выпечка", "baking", "horneado")),
    TagOption("quick", {"en": "Quick (up to 30 min)", "ru": "Быстро (до 30 минут)", "es": "Rapido (hasta 30 min)"}, ("быстро", "quick", "rapido", "до 30 минут")),
    TagOption("medium", {"en": "Medium", "ru": "Средне", "es": "Medio"}, ("средне", "medium", "medio")),
    TagOption("long", {"en": "Long", "ru": "Долго", "es": "Largo"}, ("долго", "long", "largo")),
    TagOption("easy", {"en": "Easy", "ru": "Простой", "es": "Facil"}, ("простой", "easy", "facil")),
    TagOption("advanced", {"en": "Advanced", "ru": "Требует навыков", "es": "Avanzado"}, ("требует навыков", "advanced", "avanzado")),
    TagOption("everyday", {"en": "Everyday", "ru": "На каждый день", "es": "Para cada dia"}, ("на каждый день", "everyday", "cada dia")),
    TagOption("festive", {"en": "Festive", "ru": "Праздничное", "es": "Festivo"}, ("праздничное", "festive", "festivo")),
    TagOption("kids", {"en": "Kids", "ru": "Детское", "es": "Para ninos"}, ("детское", "kids", "ninos")),
    TagOption("diet", {"en": "Diet", "ru": "Диетическое", "es": "Dietetico"}, ("диетическое", "diet", "dietetico")),
    TagOption("freezer_friendly", {"en": "Freezer friendly", "ru": "Подходит для заморозки", "es": "Apto para congelar"}, ("заморозки", "freezer", "congelar")),
    TagOption("make_ahead", {"en": "Make ahead", "ru": "Можно приготовить заранее", "es": "Preparar con antelacion"}, ("заранее", "make ahead", "antelacion")),
    TagOption("next_day", {"en": "Good for next day", "ru": "Хорошо на завтра", "es": "Bueno para el dia siguiente"}, ("на завтра", "next day", "dia siguiente")),
    TagOption("oven", {"en": "Oven", "ru": "Духовка", "es": "Horno"}, ("духовка", "oven", "horno")),
    TagOption("pan", {"en": "Pan", "ru": "Сковорода", "es": "Sarten"}, ("сковорода", "pan", "sarten")),
    TagOption("no_bake", {"en": "No bake", "ru": "Без выпечки", "es": "Sin horno"}, ("без выпечки", "no bake", "sin horno")),
    TagOption("multicooker", {"en": "Multicooker", "ru": "Мультиварка", "es": "Multicooker"}, ("мультиварка", "multicooker")),
    TagOption("soup", {"en": "Soup", "ru": "Суп", "es": "Sopa"}, ("суп", "soup", "sopa")),
    TagOption("side_dish", {"en": "Side dish", "ru": "Гарнир", "es": "Guarnicion"}, ("гарнир", "side dish", "guarnicion")),
)

RECIPE_TAGS: tuple[str, ...] = tuple(option.id for option in RECIPE_TAG_OPTIONS)


def _normalize_tag_text(value: str) -> str:
    text = unicodedata.normalize("NFD", value.strip().lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r"[.,/()\[\]{}%]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


def _build_alias_map() -> dict[str, str]:
    aliases: dict[str, str] = {}
    for option in RECIPE_TAG_OPTIONS:
        for text in (option.id, *option.labels.values(), *option.aliases):
            key = _normalize_tag_text(text)
            if key:
                aliases[key] = option.id
    return aliases


_BY_ALIAS = _build_alias_map()


def normalize_tag_id(value) -> str | None:
    """Resolve a tag id, label or alias in any language to its id."""
    if not isinstance(value, str):
        return None
    key = _normalize_tag_text(value)
    return _BY_ALIAS.get(key) if key else None

