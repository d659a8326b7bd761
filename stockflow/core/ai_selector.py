"""
AI Selector Module
Gemini helper functions: ledger text parsing, data insights and roster work
"""
import calendar
import json
import os
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from dotenv import load_dotenv

from stockflow.utils.dates import parse_month
from stockflow.utils.logger import setup_logger

load_dotenv()
logger = setup_logger(__name__)

DEFAULT_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
INSIGHT_SAMPLE_SIZE = 50
INSIGHT_FALLBACK = "Could not generate insights at this time."

STOCK_ROWS_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "date": {"type": "STRING", "description": "Format DD-Mon-YYYY if present, else null", "nullable": True},
            "code": {"type": "STRING", "description": "The item code e.g., C105"},
            "provider": {"type": "STRING", "description": "The provider/brand e.g., Celcom"},
            "phone_number": {"type": "STRING", "description": "The phone number"},
            "amount": {"type": "NUMBER", "description": "The numeric monetary value. Use 0 if missing."},
        },
        "required": ["code", "phone_number", "amount"],
    },
}

SCHEDULE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "day": {"type": "STRING", "description": "YYYY-MM-DD"},
            "assignments": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "employee_id": {"type": "STRING"},
                        "employee_name": {"type": "STRING"},
                        "shift": {"type": "STRING", "description": "Morning, Noon 1, Noon 2, OFF or AL"},
                    },
                    "required": ["employee_id", "employee_name", "shift"],
                },
            },
        },
        "required": ["day", "assignments"],
    },
}

SCHEDULE_IMAGE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "employees": {"type": "ARRAY", "items": {"type": "STRING"}},
        "flat_assignments": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "date": {"type": "STRING", "description": "YYYY-MM-DD"},
                    "employee_name": {"type": "STRING"},
                    "shift": {"type": "STRING", "description": "Morning, Noon 1, Noon 2, OFF or AL"},
                },
                "required": ["date", "employee_name", "shift"],
            },
        },
    },
    "required": ["employees", "flat_assignments"],
}


class AIServiceError(RuntimeError):
    """Gemini could not be reached or returned something unusable"""


def _configure() -> None:
    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        logger.error("GOOGLE_API_KEY is not set")
        raise AIServiceError("Missing API key. Set GOOGLE_API_KEY in the environment or .env file.")
    genai.configure(api_key=api_key)


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    if text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def ask_gemini(prompt: str, model: str = DEFAULT_MODEL) -> str:
    """
    Ask Gemini a plain-text question

    Args:
        prompt: question text
        model: model name

    Returns:
        str: answer text

    Raises:
        AIServiceError: missing key or API failure
    """
    _configure()
    logger.debug(f"Gemini call: model={model}, prompt length={len(prompt)}")
    try:
        response = genai.GenerativeModel(model).generate_content(prompt)
        return response.text or ""
    except Exception as e:
        logger.error(f"Gemini API error: {e}", exc_info=True)
        raise AIServiceError(str(e)) from e


def ask_gemini_json(contents: Any, schema: Dict[str, Any], model: str = DEFAULT_MODEL) -> Any:
    """
    Ask Gemini for JSON constrained by a response schema

    Args:
        contents: prompt text, or a list of prompt parts (text and inline images)
        schema: response schema (OpenAPI subset)
        model: model name

    Returns:
        parsed JSON (list or dict); None when the model returned no text

    Raises:
        AIServiceError: missing key, API failure or unparseable output
    """
    _configure()
    try:
        model_instance = genai.GenerativeModel(model)
        response = model_instance.generate_content(
            contents,
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": schema,
            },
        )
        text = response.text
    except Exception as e:
        logger.error(f"Gemini API error: {e}", exc_info=True)
        raise AIServiceError(str(e)) from e

    if not text:
        return None
    try:
        return json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        logger.error(f"Gemini JSON parse error: {e}; raw={text[:200]}")
        raise AIServiceError("AI returned malformed JSON") from e


def parse_stock_text(raw_text: str) -> List[Dict[str, Any]]:
    """Extract ledger rows from unstructured or semi-structured text"""
    prompt = f"""
You are a data entry assistant.
Analyze the following text block containing stock or transaction records.

The format can be one of the following:
1. Full Record: "Date, Code, Provider, Phone Number, Amount"
2. Short Record (Ending Balance): "Code, Provider, Phone Number, Amount"
3. System Report: "1. Code- Phone Provider Amount" (e.g., "2. C315- 01119938648 Celcom 942.38")

Task: Extract the data into a JSON array.
- Normalize the Code (remove hyphens if attached like "C315-").
- If the Date is present in the text, extract it.
- If the Date is missing, leave the date field as null or empty string.
- Treat empty amounts or missing values as 0.
- Remove commas from amounts (e.g. 20,000.00 -> 20000.00).

Input Text:
{raw_text}
"""
    logger.info(f"AI stock parse: {len(raw_text)} chars")
    result = ask_gemini_json(prompt, STOCK_ROWS_SCHEMA)
    return result or []


def generate_data_insights(records: List[Dict[str, Any]]) -> str:
    """
    Three-sentence summary of the ledger.

    Only the first records are sent. Never raises; failures return a
    fallback sentence.
    """
    total = len(records)
    sample = json.dumps(records[:INSIGHT_SAMPLE_SIZE], default=str)
    prompt = f"""
Analyze this partial dataset of stock records (showing {min(INSIGHT_SAMPLE_SIZE, total)} of {total} items).
The dataset contains 'IN' (stock entry) and 'OUT' (usage/sales) records.

Data: {sample}

Provide a brief, 3-sentence executive summary highlighting:
1. Overall stock movement trend (Net accumulation vs High usage).
2. Any provider dominance or high-usage items.
3. An actionable insight.
Keep it professional and concise.
"""
    try:
        answer = ask_gemini(prompt)
        return answer or "No insights generated."
    except AIServiceError as e:
        logger.warning(f"Insight generation failed: {e}")
        return INSIGHT_FALLBACK


def generate_staff_schedule(employees: List[Dict[str, Any]], month: str) -> List[Dict[str, Any]]:
    """
    Ask Gemini for a full month roster

    Args:
        employees: [{"id", "name", "primary_shift", "requests": [{"day", "shift"}]}]
        month: YYYY-MM

    Returns:
        [{"day": "YYYY-MM-DD", "assignments": [{"employee_id", "employee_name", "shift"}]}]
    """
    if not employees:
        return []

    year, month_num = parse_month(month)
    days_in_month = calendar.monthrange(year, month_num)[1]

    employees_for_prompt = [
        {
            "id": e["id"],
            "name": e["name"],
            "primary_shift": e.get("primary_shift") or "Morning",
            "requests": ", ".join(f"{r['shift']} on {r['day']}" for r in e.get("requests") or []) or "None",
        }
        for e in employees
    ]

    prompt = f"""
Create a MONTHLY work schedule for a team of {len(employees)} people for **{month}** (Total {days_in_month} days).

**TIMELINE**:
Generate assignments for every single day from {month}-01 to {month}-{days_in_month:02d}.
Ensure you return exactly {days_in_month} items in the main array.

Employees Data:
{json.dumps(employees_for_prompt)}

**SHIFTS**:
1. "Morning" (MORN): 9AM - 7PM (Main Shift)
2. "Noon 1": 1PM - 11PM (Supplementary Shift)
3. "Noon 2": 3PM - 1AM (Main Shift)
4. "OFF": Day off
5. "AL": Annual Leave (Only if requested)

**CRITICAL RULES & CONSTRAINTS**:
1. **Primary Shift Rotation (CRITICAL)**:
  - Each employee has a "primary_shift" property.
  - **You MUST assign them their "primary_shift" for EVERY working day** in the month.
  - DO NOT switch them to a different shift unless:
    a) It is absolutely necessary to meet minimum staffing constraints.
    b) They have a specific request for a different shift on that day.

2. **Off Days**:
  - Each employee must have exactly 2 days OFF per week.
  - These OFF days MUST be consecutive (e.g., Sun-Mon).

3. **Minimum Staffing**:
  - Ensure at least 2 people are on "Morning" and at least 2 people are on "Noon 2" (or Noon 1) each day if possible.
  - Total working staff per day should be balanced.

4. **Workload Distribution**:
  - **Monday, Thursday, Friday**: These are PEAK days. Increase manpower if possible.

Output Format:
Return a JSON array where each item represents a day:
[{{"day": "YYYY-MM-DD", "assignments": [{{"employee_id": "...", "employee_name": "...", "shift": "..."}}]}}]
"""
    logger.info(f"AI roster generation: {month}, {len(employees)} employees")
    result = ask_gemini_json(prompt, SCHEDULE_SCHEMA)
    return result or []


def parse_schedule_image(data: bytes, mime_type: str) -> Dict[str, Any]:
    """
    Read a roster screenshot

    Returns:
        {"employees": [names], "flat_assignments": [{"date", "employee_name", "shift"}]}
    """
    prompt = """
Analyze this image of a STAFF SCHEDULE grid.

**Task**: Extract every single cell assignment visible in the table.

**Instructions**:
1. **Dates**: Identify the header row with dates (e.g., "1 Dec", "2", "30 Nov"). Infer the year if missing (use current year).
2. **Employees**: Identify names in the first column.
3. **Assignments**: For EACH employee and EACH date, identify the shift based on TEXT and BACKGROUND COLOR.

**CRITICAL SHIFT MAPPING**:
- **GREEN** -> "Morning"
- **DARK BLUE** -> "Noon 2"
- **LIGHT BLUE / SKY** -> "Noon 1"
- **ORANGE / YELLOW** -> "OFF"
- **PINK / RED** -> "AL" (Annual Leave)

**Rules**:
- If a cell is GREEN, it is "Morning" even if text is unreadable.
- If a cell is BLUE, it is "Noon 1" or "Noon 2".
- If a cell is ORANGE, it is "OFF".
- Do NOT default to "OFF" just because text is empty. If it has color, it's a shift.
- Scan ALL columns visible in the image.
"""
    logger.info(f"AI roster image parse: {mime_type}, {len(data)} bytes")
    result: Optional[Dict[str, Any]] = ask_gemini_json(
        [prompt, {"mime_type": mime_type, "data": data}],
        SCHEDULE_IMAGE_SCHEMA,
    )
    if not result:
        raise AIServiceError("No data returned from AI")
    return {
        "employees": result.get("employees") or [],
        "flat_assignments": result.get("flat_assignments") or [],
    }
