"""Response schemas used to constrain Gemini output to a single JSON object.

These follow the OpenAPI subset accepted by ``response_schema``: no ``$ref``,
no ``additionalProperties``, and every object lists its properties.
"""

MEDICINE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Name of the medicine."},
        "uses": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Common uses of the medicine.",
        },
        "dosage": {"type": "string", "description": "Recommended dosage information."},
        "side_effects": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Potential side effects.",
        },
        "precautions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Precautions to take.",
        },
    },
    "required": ["name", "uses", "dosage", "side_effects", "precautions"],
}

PRESCRIPTION_SCHEMA = {
    "type": "object",
    "properties": {
        "medications": {
            "type": "array",
            "description": "List of prescribed medications.",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Name of the medication."},
                    "dosage": {"type": "string", "description": "Dosage strength, e.g. '500mg'."},
                    "timing": {
                        "type": "string",
                        "description": "When to take it, e.g. '1-0-1 After food'.",
                    },
                    "purpose": {
                        "type": "string",
                        "description": "The likely purpose of this medication, e.g. 'Pain relief'.",
                    },
                },
                "required": ["name", "dosage", "timing", "purpose"],
            },
        },
        "precautions": {
            "type": "array",
            "description": "General precautions or advice mentioned in the prescription.",
            "items": {"type": "string"},
        },
        "vitals": {
            "type": "object",
            "description": "Patient vitals if mentioned, as key-value pairs.",
            "properties": {
                "BP": {"type": "string", "description": "Blood pressure reading."},
                "Pulse": {"type": "string", "description": "Pulse rate."},
                "Temp": {"type": "string", "description": "Body temperature."},
            },
        },
        "drug_interactions": {
            "type": "array",
            "description": "Potential interactions between the prescribed drugs.",
            "items": {
                "type": "object",
                "properties": {
                    "medicines": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "The names of the two or more drugs that interact.",
                    },
                    "interaction_level": {
                        "type": "string",
                        "enum": ["High", "Moderate", "Low"],
                        "description": "The severity of the potential interaction.",
                    },
                    "description": {
                        "type": "string",
                        "description": "A user-friendly explanation of the interaction and what to watch out for.",
                    },
                },
                "required": ["medicines", "interaction_level", "description"],
            },
        },
        "lifestyle_and_diet_recos": {
            "type": "array",
            "description": "Lifestyle and dietary recommendations relevant to the medications or conditions.",
            "items": {"type": "string"},
        },
        "potential_conditions_summary": {
            "type": "string",
            "description": "A brief summary of the conditions likely being treated.",
        },
    },
    "required": [
        "medications",
        "precautions",
        "drug_interactions",
        "lifestyle_and_diet_recos",
        "potential_conditions_summary",
    ],
}

SYMPTOM_SCHEMA = {
    "type": "object",
    "properties": {
        "disclaimer": {
            "type": "string",
            "description": (
                "A mandatory disclaimer stating that this is not medical advice "
                "and the user should consult a healthcare professional."
            ),
        },
        "summary": {
            "type": "string",
            "description": "A brief summary of the potential issues based on the symptoms.",
        },
        "possible_conditions": {
            "type": "array",
            "description": "Possible medical conditions related to the symptoms.",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "The name of the possible condition."},
                    "description": {
                        "type": "string",
                        "description": "A brief, user-friendly description of the condition.",
                    },
                },
                "required": ["name", "description"],
            },
        },
        "advice": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Next steps for the user, such as home care or when to see a doctor.",
        },
        "urgency": {
            "type": "string",
            "enum": ["Low", "Medium", "High", "Emergency"],
            "description": "Whether immediate medical attention is needed.",
        },
    },
    "required": ["disclaimer", "summary", "possible_conditions", "advice", "urgency"],
}
