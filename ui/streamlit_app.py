# Role: Streamlit chat UI.
# - Backend is authoritative (chat + snapshot).
# - Sidebar shows ONLY the order currently being filled in.

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

BACKEND_URL = "http://127.0.0.1:8000"


# ----------------------------
# Session helpers
# ----------------------------
def ensure_session() -> None:
    if "session_id" not in st.session_state:
        st.session_state["session_id"] = str(uuid.uuid4())
    if "messages" not in st.session_state:
        st.session_state["messages"] = []
    if "busy" not in st.session_state:
        st.session_state["busy"] = False
    if "snapshot" not in st.session_state:
        st.session_state["snapshot"] = None


# ----------------------------
# Backend calls
# ----------------------------
def send_to_backend(session_id: str, user_message: str) -> List[str]:
    resp = requests.post(
        f"{BACKEND_URL}/chat",
        json={"session_id": session_id, "user_message": user_message},
        timeout=30,
    )
    resp.raise_for_status()
    return resp.json().get("messages") or []


def fetch_snapshot(session_id: str) -> Optional[Dict[str, Any]]:
    try:
        r = requests.get(f"{BACKEND_URL}/state/{session_id}", timeout=10)
        if r.status_code != 200:
            return None
        return r.json()
    except requests.RequestException:
        return None


# ----------------------------
# Formatting helpers
# ----------------------------
def _fmt_item(item: Any) -> str:
    if isinstance(item, list):
        parts = [str(i).strip() for i in item if str(i).strip()]
        return ", ".join(parts) if parts else "Not set"
    if isinstance(item, str) and item.strip():
        return item.strip()
    return "Not set"


def _fmt_date(timex: Optional[str]) -> str:
    if not timex:
        return "Not set"
    if timex.startswith("XXXX") or len(timex) < 10:
        return f"{timex} (needs a full date)"
    return timex


# ----------------------------
# Sidebar: order in progress ONLY
# ----------------------------
def render_order_summary(snapshot: Dict[str, Any]) -> None:
    order = (snapshot or {}).get("order_in_progress")
    if not order:
        st.sidebar.info("No order in progress.")
    else:
        st.sidebar.markdown(f"**Item:** {_fmt_item(order.get('item'))}")
        st.sidebar.markdown(f"**Delivery date:** {_fmt_date(order.get('delivery_date'))}")

    st.sidebar.caption(f"Orders placed this session: {snapshot.get('completed_orders', 0)}")


def render_sidebar() -> None:
    st.sidebar.title("Your order")

    if st.sidebar.button("New chat", use_container_width=True, disabled=st.session_state["busy"]):
        st.session_state["session_id"] = str(uuid.uuid4())
        st.session_state["messages"] = []
        st.session_state["snapshot"] = None
        st.rerun()

    st.sidebar.divider()

    snap = st.session_state.get("snapshot")
    if not snap:
        st.sidebar.info("Say hi to start an order.")
        return

    render_order_summary(snap)


# ----------------------------
# Chat
# ----------------------------
def render_chat() -> None:
    for msg in st.session_state["messages"]:
        with st.chat_message(msg["role"]):
            st.write(msg["content"])


# ----------------------------
# Main
# ----------------------------
def main() -> None:
    st.set_page_config(page_title="Order Bot", layout="wide")

    st.title("Order Bot")
    st.caption('Order a delivery, e.g. "Deliver 10 kg rice on March 22, 2020". Say "cancel" to stop an order.')

    ensure_session()
    render_sidebar()
    render_chat()

    user_input = st.chat_input("Type a message…", disabled=st.session_state["busy"])
    if not user_input:
        return

    # Echo user message immediately
    st.session_state["messages"].append({"role": "user", "content": user_input})
    with st.chat_message("user"):
        st.write(user_input)

    st.session_state["busy"] = True
    try:
        with st.spinner("Thinking..."):
            bot_messages = send_to_backend(st.session_state["session_id"], user_input)

        for text in bot_messages:
            st.session_state["messages"].append({"role": "assistant", "content": text})
            with st.chat_message("assistant"):
                st.write(text)

        # Refresh snapshot after each turn
        st.session_state["snapshot"] = fetch_snapshot(st.session_state["session_id"])

    except requests.RequestException:
        msg = "I couldn't reach the backend. Make sure the API is running on http://127.0.0.1:8000."
        st.session_state["messages"].append({"role": "assistant", "content": msg})
        with st.chat_message("assistant"):
            st.error(msg)
    finally:
        st.session_state["busy"] = False


if __name__ == "__main__":
    main()
