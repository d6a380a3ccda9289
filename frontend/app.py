import os
from typing import Optional

import requests
import streamlit as st

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")


class ApiError(Exception):
    pass


def call_api(method: str, path: str, token: Optional[str] = None, timeout: int = 15, **kwargs) -> requests.Response:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    resp = requests.request(method, f"{BACKEND_URL}{path}", headers=headers, timeout=timeout, **kwargs)
    if not resp.ok:
        try:
            message = resp.json().get("message", resp.text)
        except ValueError:
            message = resp.text
        raise ApiError(message)
    return resp


def login(email: str, password: str) -> dict:
    return call_api("POST", "/auth/login", json={"email": email, "password": password}).json()


def register(name: str, email: str, password: str) -> dict:
    return call_api("POST", "/auth/register", json={"name": name, "email": email, "password": password}).json()


def generate(token: str, payload: dict) -> dict:
    # Generation walks several models; allow for slow providers.
    return call_api("POST", "/itineraries/generate", token=token, json=payload, timeout=120).json()["data"]


def list_itineraries(token: str) -> list[dict]:
    return call_api("GET", "/itineraries", token=token).json()["data"]


def add_collaborator(token: str, itinerary_id: str, email: str) -> dict:
    return call_api("POST", f"/itineraries/{itinerary_id}/collaborate", token=token, json={"email": email}).json()[
        "data"
    ]


def remove_collaborator(token: str, itinerary_id: str, collaborator_id: str) -> dict:
    resp = call_api(
        "DELETE",
        f"/itineraries/{itinerary_id}/collaborate",
        token=token,
        json={"collaborator_id": collaborator_id},
    )
    return resp.json()["data"]


def set_public(token: str, itinerary_id: str, is_public: bool) -> dict:
    return call_api("PUT", f"/itineraries/{itinerary_id}", token=token, json={"is_public": is_public}).json()["data"]


def delete_itinerary(token: str, itinerary_id: str) -> None:
    call_api("DELETE", f"/itineraries/{itinerary_id}", token=token)


def download_pdf(token: str, itinerary_id: str) -> bytes:
    return call_api("GET", f"/itineraries/{itinerary_id}/pdf", token=token, timeout=30).content


def comma_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def render_itinerary(token: str, user: dict, itinerary: dict) -> None:
    is_owner = itinerary["owner"]["id"] == user["id"]
    st.header(itinerary["title"])
    cols = st.columns(3)
    cols[0].metric("Days", itinerary["total_days"])
    cols[1].metric("Budget", itinerary["budget"])
    cols[2].metric("Estimated total", str(itinerary["summary"].get("total_estimated_cost") or "-"))
    if itinerary["interests"]:
        st.caption("Interests: " + ", ".join(itinerary["interests"]))

    for number, day in enumerate(itinerary["days"], start=1):
        with st.expander(f"Day {number}", expanded=number == 1):
            for activity in day["activities"]:
                line = f"**{activity['time']} {activity['title']}**"
                if activity.get("duration"):
                    line += f" ({activity['duration']})"
                st.markdown(line + f"  \n{activity['description']}")
                if activity.get("location"):
                    st.caption(activity["location"])
            if day.get("notes"):
                st.info(day["notes"])

    summary = itinerary["summary"]
    if summary["highlights"]:
        st.subheader("Highlights")
        st.markdown("\n".join(f"- {h}" for h in summary["highlights"]))
    if summary["tips"]:
        st.subheader("Tips")
        st.markdown("\n".join(f"- {t}" for t in summary["tips"]))

    try:
        st.download_button(
            "Download PDF",
            data=download_pdf(token, itinerary["id"]),
            file_name=f"{itinerary['destination']}-itinerary.pdf",
            mime="application/pdf",
        )
    except (ApiError, requests.RequestException) as exc:
        st.error(f"PDF export failed: {exc}")

    public = st.toggle("Public", value=itinerary["is_public"], key=f"public-{itinerary['id']}")
    if public != itinerary["is_public"]:
        try:
            st.session_state["current"] = set_public(token, itinerary["id"], public)
            st.rerun()
        except (ApiError, requests.RequestException) as exc:
            st.error(f"Update failed: {exc}")

    st.subheader("Collaborators")
    st.caption(f"Owner: {itinerary['owner'].get('name') or itinerary['owner']['id']}")
    for collaborator in itinerary["collaborators"]:
        cols = st.columns([4, 1])
        cols[0].write(f"{collaborator.get('name') or collaborator['id']} ({collaborator.get('email') or '-'})")
        if is_owner and cols[1].button("Remove", key=f"remove-{collaborator['id']}"):
            try:
                st.session_state["current"] = remove_collaborator(token, itinerary["id"], collaborator["id"])
                st.rerun()
            except (ApiError, requests.RequestException) as exc:
                st.error(f"Remove failed: {exc}")

    if is_owner:
        with st.form(f"collaborate-{itinerary['id']}", clear_on_submit=True):
            email = st.text_input("Invite by email")
            if st.form_submit_button("Add collaborator"):
                try:
                    st.session_state["current"] = add_collaborator(token, itinerary["id"], email)
                    st.success(f"Added {email}")
                    st.rerun()
                except (ApiError, requests.RequestException) as exc:
                    st.error(f"Could not add collaborator: {exc}")

        if st.button("Delete itinerary", type="secondary"):
            try:
                delete_itinerary(token, itinerary["id"])
                st.session_state.pop("current", None)
                st.success("Itinerary deleted")
                st.rerun()
            except (ApiError, requests.RequestException) as exc:
                st.error(f"Delete failed: {exc}")


st.set_page_config(page_title="WanderPlan", layout="wide")
st.title("WanderPlan")
st.caption("Backend: FastAPI | UI: Streamlit | Itineraries by AI")

token = st.session_state.get("token")
user = st.session_state.get("user")

if not token:
    login_tab, register_tab = st.tabs(["Sign in", "Create account"])
    with login_tab, st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign in"):
            try:
                result = login(email, password)
                st.session_state["token"] = result["token"]
                st.session_state["user"] = result["data"]
                st.rerun()
            except (ApiError, requests.RequestException) as exc:
                st.error(f"Sign in failed: {exc}")
    with register_tab, st.form("register_form"):
        name = st.text_input("Name")
        email = st.text_input("Email", key="register_email")
        password = st.text_input("Password", type="password", key="register_password")
        if st.form_submit_button("Create account"):
            try:
                result = register(name, email, password)
                st.session_state["token"] = result["token"]
                st.session_state["user"] = result["data"]
                st.rerun()
            except (ApiError, requests.RequestException) as exc:
                st.error(f"Registration failed: {exc}")
    st.stop()

st.sidebar.write(f"Signed in as **{user['name']}**")
if st.sidebar.button("Sign out"):
    st.session_state.clear()
    st.rerun()

with st.sidebar.form("generate_form"):
    st.subheader("New trip")
    destination = st.text_input("Destination", value="Paris")
    days = st.number_input("Days", min_value=1, max_value=30, value=3)
    budget = st.text_input("Budget", value="$1000")
    interests = st.text_input("Interests (comma-separated)", value="food, culture")
    submitted = st.form_submit_button("Generate itinerary")

if submitted:
    payload = {
        "destination": destination,
        "days": int(days),
        "budget": budget,
        "interests": comma_list(interests),
    }
    with st.spinner("Planning your trip..."):
        try:
            st.session_state["current"] = generate(token, payload)
            st.success("Itinerary generated")
        except (ApiError, requests.RequestException) as exc:
            st.error(f"Failed to generate itinerary: {exc}")

try:
    itineraries = list_itineraries(token)
except (ApiError, requests.RequestException) as exc:
    st.sidebar.error(f"Could not load itineraries: {exc}")
    itineraries = []

st.sidebar.subheader("My itineraries")
for item in itineraries:
    if st.sidebar.button(item["title"], key=f"open-{item['id']}"):
        st.session_state["current"] = item

current = st.session_state.get("current")
if current:
    render_itinerary(token, user, current)
else:
    st.info("Generate a trip or pick one from the sidebar.")
