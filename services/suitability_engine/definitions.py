# services/suitability_engine/definitions.py
# Static definitions for the business suitability assessment.

# --- Question categories (fixed sampling order) ---
CATEGORIES = ["skills", "preferences", "readiness", "motivation"]

# --- Likert scale ---
MIN_LIKERT = 1
MAX_LIKERT = 5

DEFAULT_QUESTION_COUNT = 40
DEFAULT_TOP_N = 3

# Business types of the deployed questionnaire. The scorer never relies on
# this list; it scores whatever keys appear in question weights. The import
# preview reports sheet business names that fall outside it.
BUSINESS_TYPES = [
    "ธุรกิจบริการ",
    "ธุรกิจการค้า",
    "ธุรกิจอาหารและเครื่องดื่ม",
    "ธุรกิจการเงินและการลงทุน",
    "ธุรกิจเทคโนโลยีและนวัตกรรม",
    "ธุรกิจโลจิสติกส์และซัพพลายเชน",
    "ธุรกิจการตลาดและโฆษณา",
    "ธุรกิจสิ่งแวดล้อม",
    "ธุรกิจสุขภาพ/ความงาม",
    "ธุรกิจระหว่างประเทศ",
    "ธุรกิจสร้างสรรค์และสื่อ",
    "ธุรกิจการเกษตร",
    "ธุรกิจท่องเที่ยว",
    "ธุรกิจเพื่อสังคม",
]

# --- Import sheet mappings ---

# "Domains" column of the question sheet -> category
DOMAIN_TO_CATEGORY = {
    "Skill": "skills",
    "Interest": "preferences",
    "Readiness": "readiness",
    "Motivation": "motivation",
}

# Sheet spellings that differ from the standard business type names.
# Names already in BUSINESS_TYPES map to themselves.
BUSINESS_NAME_ALIASES = {
    "ธุรกิจด้านการตลาดและโฆษณา": "ธุรกิจการตลาดและโฆษณา",
    "ธุรกิจซื้อขายสินค้า": "ธุรกิจการค้า",
    "ธุรกิจสุขภาพ / ความงาม": "ธุรกิจสุขภาพ/ความงาม",
    "ธุรกิจเกษตรกรรม": "ธุรกิจการเกษตร",
}

# Related-business weights derived from a question's key attributes.
# {primary business: [(keywords, {related business: weight}), ...]}
# A rule applies when any of its keywords occurs in the lower-cased attributes.
RELATED_BUSINESS_RULES = {
    "ธุรกิจการตลาดและโฆษณา": [
        (("คิดสร้างสรรค์", "เนื้อหา"), {"ธุรกิจสร้างสรรค์และสื่อ": 0.7}),
        (("เข้าใจลูกค้า", "คุยกับลูกค้า"), {"ธุรกิจบริการ": 0.5}),
        (("วิเคราะห์",), {"ธุรกิจเทคโนโลยีและนวัตกรรม": 0.4}),
    ],
    "ธุรกิจบริการ": [
        (("ดูแลลูกค้า", "คุยและเข้าสังคม"), {"ธุรกิจการตลาดและโฆษณา": 0.5, "ธุรกิจท่องเที่ยว": 0.6}),
        (("สุขภาพ", "ความงาม"), {"ธุรกิจสุขภาพ/ความงาม": 0.7}),
    ],
    "ธุรกิจการค้า": [
        (("จัดการสต็อก", "ซัพพลาย"), {"ธุรกิจโลจิสติกส์และซัพพลายเชน": 0.6}),
        (("วิเคราะห์ตลาด", "เจรจา"), {"ธุรกิจการตลาดและโฆษณา": 0.5}),
        (("ต่างประเทศ",), {"ธุรกิจระหว่างประเทศ": 0.8}),
    ],
    "ธุรกิจเทคโนโลยีและนวัตกรรม": [
        (("วิเคราะห์", "ข้อมูล"), {"ธุรกิจการเงินและการลงทุน": 0.5}),
        (("การตลาด",), {"ธุรกิจการตลาดและโฆษณา": 0.4}),
    ],
    "ธุรกิจการเงินและการลงทุน": [
        (("วิเคราะห์", "ข้อมูล"), {"ธุรกิจเทคโนโลยีและนวัตกรรม": 0.5}),
    ],
    "ธุรกิจสร้างสรรค์และสื่อ": [
        (("การตลาด", "เล่าเรื่อง"), {"ธุรกิจการตลาดและโฆษณา": 0.7}),
    ],
    "ธุรกิจโลจิสติกส์และซัพพลายเชน": [
        (("จัดการ", "วางแผน"), {"ธุรกิจการค้า": 0.6}),
        (("เทคโนโลยี",), {"ธุรกิจเทคโนโลยีและนวัตกรรม": 0.4}),
    ],
}

# Header detection for CSV sheets
CSV_HEADER_MARKERS = ("Business", "ธุรกิจ")
