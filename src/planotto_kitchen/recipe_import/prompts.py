"""System prompts and fixed user-facing sentences for recipe import."""

# JSON shape every import prompt asks the model to return
RECIPE_JSON_SHAPE = (
    '{"recipe":{"title":"","shortDescription":"","instructions":"","servings":null,'
    '"timeMinutes":null,"image":"","tags":[],'
    '"ingredients":[{"name":"","amount":0,"unit":"pcs","needsReview":true}]},'
    '"message":"","issues":[]}'
)

UNIT_RULE = "Use only these units: g, kg, ml, l, pcs, tsp, tbsp, to_taste."
RANGE_RULE = "If a line has a range (for example 3-4), use the midpoint and set needsReview=true."
NAME_RULE = "Return the ingredient name without quantity and unit."

OCR_STRUCTURING_PROMPT = (
    "You structure OCR text of a recipe. "
    f"Return strictly JSON: {RECIPE_JSON_SHAPE}. "
    "Do not invent data. Keep the order of the steps. "
    f"{NAME_RULE} {UNIT_RULE}"
)

PHOTO_IMPORT_PROMPT = (
    "You are an OCR assistant for recipes. "
    "The input is one or more photos of pages of ONE recipe. Read them in the order given "
    "and assemble a single recipe. "
    "Do not invent ingredients or steps; extract only what is actually visible in the photos. "
    f"Return only JSON: {RECIPE_JSON_SHAPE}. "
    "Keep ingredients and steps apart. Keep the order of the steps and their numbering. "
    f"{UNIT_RULE} {RANGE_RULE} "
    f"{NAME_RULE} If something is doubtful, explain it in issues."
)

URL_IMPORT_PROMPT = (
    "You extract a recipe from a link. "
    f"Return only JSON: {RECIPE_JSON_SHAPE}. "
    f"Keep ingredients and steps apart. {UNIT_RULE} {RANGE_RULE} "
    f"{NAME_RULE} If unsure, set needsReview=true and mention it in issues."
)

PAGE_ORDER_NOTE = "Given in order: 1..N"

# ---------------------------------------------------------------------------
# Fixed issue sentences. Provider names, status codes and raw bodies never
# appear here.
# ---------------------------------------------------------------------------

BASE_FALLBACK_ISSUE = "Using basic recognition. The result may be incomplete."
OCR_UNAVAILABLE_ISSUE = "Photo recognition service is temporarily unavailable. Using basic mode."
OCR_JOB_FAILED_ISSUE = "Some photos could not be recognized. Using basic mode."
OCR_TIMEOUT_ISSUE = "Photo recognition took too long. Using basic mode."
OCR_TEXT_INCOMPLETE_ISSUE = (
    "Text from the photos was only partially recognized. Continue manually if needed."
)
UNSTRUCTURED_ISSUE = "Could not fully structure the text. Fill in the missing parts manually."
RECOGNITION_INCOMPLETE_ISSUE = "Recognition was incomplete."
REVIEW_UNITS_ISSUE = "Check units and amounts."

# Messages
OCR_SUCCESS_MESSAGE = "Imported via OCR. Check it before saving."
IMPORT_SUCCESS_MESSAGE = "Import done. Check it before saving."
MULTI_PHOTO_SUCCESS_MESSAGE = "Imported from several photos. Check the order of the steps."
PHOTO_FAILURE_MESSAGE = (
    "Could not reliably recognize the recipe from the photo. "
    "Try a sharper photo with larger text."
)
DRAFT_CREATED_MESSAGE = "Draft created. Check ingredients and steps before saving."

# Titles used when the model returned none
PHOTO_FALLBACK_TITLE = "Imported recipe from photo"
URL_FALLBACK_TITLE = "Imported recipe from link"
GENERIC_FALLBACK_TITLE = "Imported recipe"


def photos_processed_issue(count: int) -> str:
    return f"Processed photos: {count}. {RECOGNITION_INCOMPLETE_ISSUE}"
