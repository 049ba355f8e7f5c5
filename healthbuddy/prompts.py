"""Prompt text and message builders for each gateway operation."""

import base64
import json

from langchain_core.messages import HumanMessage

CHAT_SYSTEM_PROMPT = (
    "You are 'GenAI Health Buddy', a friendly and empathetic AI assistant. Your goal is to "
    "provide helpful information about health, wellness, and medications. You can discuss "
    "symptoms, and medicine interactions, or answer general health questions. IMPORTANT: You "
    "must always include a disclaimer that you are not a medical professional and your advice "
    "should not replace consultation with a qualified healthcare provider, especially when "
    "giving suggestions about health conditions or interactions."
)

CHAT_GREETING = (
    "Hello! I'm your GenAI Health Buddy. You can ask me about medicine interactions, health "
    "symptoms, or general wellness. How can I help?\n\n"
    "**Disclaimer:** I am an AI assistant, not a medical professional. "
    "Please consult a doctor for medical advice."
)

NO_MARKDOWN = "Do not include any markdown formatting like ```json or any introductory text."

PRESCRIPTION_PROMPT = f"""Provide a deep analysis of this medical prescription image. Your audience is the patient, so make the language clear and easy to understand.
1. **Medications**: Extract all medications. For each, specify its name, dosage, timing (when to take it), and its likely purpose (e.g. "for blood pressure").
2. **Drug Interactions**: Critically analyze the list of medications for potential drug-drug interactions. For each interaction found, identify the medicines involved, the severity level ('High', 'Moderate', or 'Low'), and a simple explanation of what could happen. If no interactions are found, return an empty array for this field.
3. **Potential Conditions**: Based on the collection of medicines, infer the likely health condition(s) being treated and provide a brief summary.
4. **Lifestyle & Diet**: Give some general lifestyle and dietary recommendations that would be beneficial for the likely conditions.
5. **Precautions**: List any general precautions or advice written on the prescription.
6. **Vitals**: If any patient vitals (like BP, pulse) are mentioned, extract them.

Return the final output as a single, clean JSON object that adheres to the provided schema. {NO_MARKDOWN}"""


def medicine_prompt(medicine_name: str) -> list:
    return [("user", (
        f'Provide a user-friendly medical overview for "{medicine_name}". Detail its primary '
        "uses, standard dosage, common side effects, and important precautions. The target "
        "audience is a patient, so keep the language clear and concise. Structure the output "
        f"as a JSON object. {NO_MARKDOWN}"
    ))]


def prescription_prompt(image: bytes, mime_type: str) -> list:
    """Inline the image as a base64 data URL followed by the analysis instructions."""
    encoded = base64.b64encode(image).decode("ascii")
    return [HumanMessage(content=[
        {"type": "image_url", "image_url": f"data:{mime_type};base64,{encoded}"},
        {"type": "text", "text": PRESCRIPTION_PROMPT},
    ])]


def symptom_prompt(symptoms: str) -> list:
    return [("user", (
        f'A user has the following symptoms: "{symptoms}". Provide a preliminary analysis. '
        "IMPORTANT: You MUST include a clear disclaimer that this is not a medical diagnosis "
        "and they must consult a doctor. Based on the symptoms, list possible conditions, "
        "provide general advice, and assess the urgency. The language should be clear and for "
        f"a general audience. Structure the output as a JSON object. {NO_MARKDOWN}"
    ))]


def translation_prompt(payload: dict, lang_code: str) -> list:
    data_string = json.dumps(payload, indent=2, ensure_ascii=False)
    return [("user", (
        f'Translate the JSON object below into the language with code "{lang_code}".\n'
        "IMPORTANT:\n"
        "- Translate only the string values of the JSON properties.\n"
        "- Do NOT translate the JSON keys.\n"
        "- Do NOT alter the JSON structure.\n"
        "- Keep the fixed severity and urgency values (High, Moderate, Medium, Low, "
        "Emergency) in English.\n"
        "- Do NOT add any extra text, comments, or markdown formatting like ```json. "
        "The output MUST be only the translated JSON object.\n\n"
        f"JSON to translate:\n{data_string}"
    ))]
