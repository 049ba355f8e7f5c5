"""AI gateway: schema-constrained Gemini calls for medicines, prescriptions and symptoms."""

import json
from concurrent.futures import ThreadPoolExecutor

from langchain_google_genai import ChatGoogleGenerativeAI
from loguru import logger
from pydantic import BaseModel, ValidationError

from healthbuddy import config
from healthbuddy.errors import (
    AnalysisError,
    MedicineLookupError,
    ResponseFormatError,
    TranslationError,
)
from healthbuddy.models import MedicineComparison, MedicineInfo, PrescriptionInfo, SymptomInfo
from healthbuddy.prompts import medicine_prompt, prescription_prompt, symptom_prompt, translation_prompt
from healthbuddy.schemas import MEDICINE_SCHEMA, PRESCRIPTION_SCHEMA, SYMPTOM_SCHEMA

ORIGINAL_LANGUAGE = "en"


def _build_llm(response_schema: dict | None = None):
    kwargs = {}
    if response_schema is not None:
        kwargs["response_schema"] = response_schema
    return ChatGoogleGenerativeAI(
        model=config.GEMINI_MODEL,
        google_api_key=config.google_api_key(),
        temperature=config.GEMINI_TEMPERATURE,
        response_mime_type="application/json",
        **kwargs,
    )


def response_text(message) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    # Multi-part responses come back as a list of str or {"type": "text", ...} blocks
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def _parse_json(raw_text: str) -> dict:
    text = raw_text.strip()
    if not text:
        raise ResponseFormatError("No response text received from the AI model.")
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        parsed = _parse_fenced(text)
    if not isinstance(parsed, dict):
        raise ResponseFormatError("The AI model returned JSON that is not an object.")
    return parsed


def _parse_fenced(text: str):
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    try:
        return json.loads(text.strip())
    except json.JSONDecodeError as e:
        raise ResponseFormatError("The AI model returned a response that is not valid JSON.") from e


def _validate(record_type: type[BaseModel], parsed: dict):
    try:
        return record_type.model_validate(parsed)
    except ValidationError as e:
        raise ResponseFormatError(
            f"The AI model response does not match the {record_type.__name__} schema."
        ) from e


def _generate(messages: list, response_schema: dict | None = None) -> dict:
    llm = _build_llm(response_schema)
    response = llm.invoke(messages)
    return _parse_json(response_text(response))


def key_paths(value, prefix: tuple = ()) -> set[tuple]:
    """Every dict key and list index reachable in ``value``, as tuples of path steps."""
    paths = set()
    if isinstance(value, dict):
        for key, item in value.items():
            path = prefix + (key,)
            paths.add(path)
            paths |= key_paths(item, path)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            path = prefix + (index,)
            paths.add(path)
            paths |= key_paths(item, path)
    return paths


def get_medicine_info(medicine_name: str) -> MedicineInfo:
    name = medicine_name.strip()
    if not name:
        raise MedicineLookupError("Please enter the name of a medicine.")

    logger.info("Looking up medicine {!r}", name)
    try:
        parsed = _generate(medicine_prompt(name), MEDICINE_SCHEMA)
        return _validate(MedicineInfo, parsed)
    except Exception as e:
        logger.exception("Error fetching medicine info for {!r}", name)
        raise MedicineLookupError("Failed to fetch information for the specified medicine.") from e


def analyze_prescription(image: bytes, mime_type: str) -> PrescriptionInfo:
    if not image or not mime_type.startswith("image/"):
        raise AnalysisError("Please upload a prescription image (PNG, JPEG or WEBP).")

    logger.info("Analyzing prescription image ({} bytes, {})", len(image), mime_type)
    try:
        parsed = _generate(prescription_prompt(image, mime_type), PRESCRIPTION_SCHEMA)
        return _validate(PrescriptionInfo, parsed)
    except Exception as e:
        logger.exception("Error analyzing prescription")
        raise AnalysisError(
            "Failed to analyze prescription. The image may be unclear or the format is not supported."
        ) from e


def analyze_symptoms(symptoms: str) -> SymptomInfo:
    text = symptoms.strip()
    if not text:
        raise AnalysisError("Please describe your symptoms.")

    logger.info("Analyzing symptoms ({} chars)", len(text))
    try:
        parsed = _generate(symptom_prompt(text), SYMPTOM_SCHEMA)
        info = _validate(SymptomInfo, parsed)
        if not info.disclaimer.strip():
            raise ResponseFormatError("The AI model response is missing the medical disclaimer.")
        return info
    except Exception as e:
        logger.exception("Error analyzing symptoms")
        raise AnalysisError("Failed to analyze symptoms.") from e


def translate(record, lang_code: str):
    """Translate the string values of a record, keeping its keys and shape.

    ``record`` is a response model or a plain dict; the result has the same type.
    Records are generated in English, so ``"en"`` returns the record itself
    without calling the model.
    """
    if lang_code == ORIGINAL_LANGUAGE:
        return record

    is_model = isinstance(record, BaseModel)
    payload = record.model_dump(exclude_none=True) if is_model else record

    logger.info("Translating {} to {!r}", type(record).__name__, lang_code)
    try:
        translated = _generate(translation_prompt(payload, lang_code))
        missing = key_paths(payload) - key_paths(translated)
        added = key_paths(translated) - key_paths(payload)
        if missing or added:
            raise ResponseFormatError(
                f"Translated structure differs: {len(missing)} missing, {len(added)} added paths."
            )
        return _validate(type(record), translated) if is_model else translated
    except Exception as e:
        logger.exception("Translation to {!r} failed", lang_code)
        raise TranslationError("Failed to translate content. Please try again.") from e


def translate_many(records: list, lang_code: str) -> list:
    """Translate independent records concurrently, preserving order."""
    if lang_code == ORIGINAL_LANGUAGE or not records:
        return list(records)
    with ThreadPoolExecutor(max_workers=len(records)) as pool:
        return list(pool.map(lambda record: translate(record, lang_code), records))


def compare_medicines(first: str, second: str, lang_code: str = ORIGINAL_LANGUAGE) -> MedicineComparison:
    with ThreadPoolExecutor(max_workers=2) as pool:
        first_future = pool.submit(get_medicine_info, first)
        second_future = pool.submit(get_medicine_info, second)
        pair = [first_future.result(), second_future.result()]

    first_info, second_info = translate_many(pair, lang_code)
    return MedicineComparison(first=first_info, second=second_info)
