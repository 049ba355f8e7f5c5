"""Streamlit UI for GenAI Health Buddy."""

import os

import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from healthbuddy.config import RELAY_URL
from healthbuddy.errors import RelayError
from healthbuddy.models import LANGUAGES, PrescriptionInfo
from healthbuddy.whatsapp import send_prescription_summary

API_URL = os.environ.get("API_URL", "http://localhost:8000")

URGENCY_ALERTS = {
    "Emergency": st.error,
    "High": st.error,
    "Medium": st.warning,
    "Low": st.success,
}

st.set_page_config(page_title="GenAI Health Buddy", layout="wide")
st.title("GenAI Health Buddy")
st.markdown("Medicine information, prescription analysis and symptom checks powered by Google Gemini")
st.caption("Health Buddy is an AI assistant, not a medical professional. Always consult a doctor.")
st.divider()

try:
    requests.get(f"{API_URL}/health", timeout=5)
except Exception:
    st.error(f"Could not connect to API at {API_URL}. Is the FastAPI server running?")
    st.stop()

lang = st.sidebar.selectbox(
    "Language",
    list(LANGUAGES),
    format_func=lambda code: LANGUAGES[code],
)


def post(path: str, **kwargs):
    """POST to the API; returns the JSON body or shows the error and returns None."""
    try:
        resp = requests.post(f"{API_URL}{path}", timeout=90, **kwargs)
    except requests.exceptions.Timeout:
        st.error("Request timed out. Please try again.")
        return None
    except Exception as e:
        st.error(f"Error: {str(e)}")
        return None
    if resp.status_code != 200:
        try:
            st.error(resp.json()["detail"])
        except (ValueError, KeyError):
            st.error(f"API error: {resp.status_code} - {resp.text}")
        return None
    return resp.json()


class TranslationUnavailable(Exception):
    pass


@st.cache_data(show_spinner="Translating...")
def translate_record(kind: str, data: dict, lang_code: str) -> dict:
    resp = requests.post(
        f"{API_URL}/translate",
        json={"kind": kind, "data": data, "lang": lang_code},
        timeout=90,
    )
    if resp.status_code != 200:
        try:
            detail = resp.json()["detail"]
        except (ValueError, KeyError):
            detail = f"API error: {resp.status_code} - {resp.text}"
        raise TranslationUnavailable(detail)
    return resp.json()


def translated(kind: str, data: dict) -> dict:
    """``data`` in the sidebar language, or the original when translation fails."""
    if lang == "en":
        return data
    try:
        return translate_record(kind, data, lang)
    except TranslationUnavailable as e:
        st.error(str(e))
    except requests.exceptions.RequestException as e:
        st.error(f"Error: {str(e)}")
    return data


def bullet_list(title: str, items: list[str]):
    if items:
        st.markdown(f"**{title}**")
        st.markdown("\n".join(f"- {item}" for item in items))


def render_medicine(info: dict):
    st.subheader(info["name"])
    bullet_list("Uses", info["uses"])
    st.markdown(f"**Dosage:** {info['dosage']}")
    bullet_list("Side effects", info["side_effects"])
    bullet_list("Precautions", info["precautions"])


tab_medicine, tab_prescription, tab_symptoms, tab_chat = st.tabs(
    ["Medicine Search", "Prescription", "Symptom Checker", "Health Chat"]
)


# -- Medicine Search Tab --

with tab_medicine:
    compare_mode = st.toggle("Compare two medicines")
    col1, col2 = st.columns(2)
    first = col1.text_input("Medicine name", placeholder="e.g. Dolo 650")
    second = col2.text_input("Second medicine", disabled=not compare_mode)

    if st.button("Search", type="primary", disabled=not first.strip()):
        if compare_mode and second.strip():
            with st.spinner(f"Comparing {first} and {second}..."):
                st.session_state.comparison = post(
                    "/medicine/compare", json={"first": first, "second": second, "lang": "en"}
                )
            st.session_state.medicine = None
        else:
            with st.spinner(f"Searching for {first}..."):
                st.session_state.medicine = post("/medicine", json={"name": first})
            st.session_state.comparison = None

    if st.session_state.get("comparison"):
        left, right = st.columns(2)
        with left:
            render_medicine(translated("medicine", st.session_state.comparison["first"]))
        with right:
            render_medicine(translated("medicine", st.session_state.comparison["second"]))
    elif st.session_state.get("medicine"):
        render_medicine(translated("medicine", st.session_state.medicine))


# -- Prescription Tab --

with tab_prescription:
    with st.form("prescription_form"):
        patient_name = st.text_input("Patient name")
        phone = st.text_input("WhatsApp number (with country code)")
        upload = st.file_uploader("Prescription image", type=["png", "jpg", "jpeg", "webp"])
        submitted = st.form_submit_button("Analyze Prescription", type="primary")

    if submitted and upload is not None:
        with st.spinner("Analyzing your prescription..."):
            st.session_state.prescription = post(
                "/prescription", files={"file": (upload.name, upload.getvalue(), upload.type)}
            )
        st.session_state.patient = {"name": patient_name, "phone": phone}

    if st.session_state.get("prescription"):
        result = translated("prescription", st.session_state.prescription)

        st.markdown("### Medications")
        st.table(result["medications"])

        if result["drug_interactions"]:
            st.markdown("### Drug Interactions")
            for interaction in result["drug_interactions"]:
                message = f"**{' + '.join(interaction['medicines'])}** ({interaction['interaction_level']}): "
                alert = st.error if interaction["interaction_level"] == "High" else st.warning
                alert(message + interaction["description"])
        else:
            st.success("No drug interactions found.")

        st.markdown("### Potential Conditions")
        st.markdown(result["potential_conditions_summary"])
        bullet_list("Lifestyle & diet", result["lifestyle_and_diet_recos"])
        bullet_list("Precautions", result["precautions"])
        if result.get("vitals"):
            st.markdown("**Vitals**")
            st.json(result["vitals"])

        patient = st.session_state.get("patient", {})
        if st.button("Send summary on WhatsApp", disabled=not (patient.get("name") and patient.get("phone"))):
            try:
                send_prescription_summary(
                    patient["name"],
                    patient["phone"],
                    PrescriptionInfo.model_validate(st.session_state.prescription),
                    RELAY_URL,
                )
                st.success("Summary sent.")
            except RelayError as e:
                st.error(e.message)


# -- Symptom Checker Tab --

with tab_symptoms:
    symptom_text = st.text_area("Describe your symptoms", placeholder="e.g. headache and mild fever for two days")
    if st.button("Check Symptoms", type="primary", disabled=not symptom_text.strip()):
        with st.spinner("Analyzing symptoms..."):
            st.session_state.symptoms = post("/symptoms", json={"symptoms": symptom_text})

    if st.session_state.get("symptoms"):
        result = translated("symptom", st.session_state.symptoms)
        st.info(result["disclaimer"])
        URGENCY_ALERTS.get(result["urgency"], st.info)(f"**Urgency: {result['urgency']}**")
        st.markdown(result["summary"])
        st.markdown("### Possible Conditions")
        for condition in result["possible_conditions"]:
            with st.expander(condition["name"]):
                st.markdown(condition["description"])
        bullet_list("Advice", result["advice"])


# -- Health Chat Tab --

with tab_chat:
    st.subheader("Chat with Health Buddy")

    if "chat_session_id" not in st.session_state:
        started = post("/chat/sessions")
        if started:
            st.session_state.chat_session_id = started["session_id"]
            st.session_state.chat_messages = started["messages"]

    chat_container = st.container()
    user_input = st.chat_input(
        "Ask about medicines, symptoms or wellness...",
        disabled="chat_session_id" not in st.session_state,
    )

    with chat_container:
        for msg in st.session_state.get("chat_messages", []):
            with st.chat_message("assistant" if msg["role"] == "model" else "user"):
                st.markdown(msg["text"])

        if user_input:
            with st.chat_message("user"):
                st.markdown(user_input)

            with st.chat_message("assistant"):
                with st.spinner("Thinking..."):
                    data = post(
                        f"/chat/sessions/{st.session_state.chat_session_id}/messages",
                        json={"message": user_input},
                    )
                if data:
                    st.markdown(data["reply"])
                    st.session_state.chat_messages = data["messages"]
