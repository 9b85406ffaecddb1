import asyncio

import streamlit as st

from backend.controller import GenerationController
from backend.gen_client import GenerationError
from backend.model import GenerationState, View, select_view, status_html
from backend.utils import setup_logging
from config.settings import settings


def render(container, state: GenerationState) -> None:
    """Draw one of the three views into the given container."""
    view = select_view(state)
    with container.container():
        if view is View.LOADING:
            st.markdown("<p style='text-align:center;color:#ffffffb3'>Creating image with AI...</p>",
                        unsafe_allow_html=True)
            st.caption(state.message)
        elif view is View.EMPTY:
            st.markdown(status_html(state.message),
                        unsafe_allow_html=True)
        else:
            st.image(state.image_url, use_container_width=True)


def on_download(controller: GenerationController) -> None:
    try:
        path = asyncio.run(controller.download())
    except (GenerationError, OSError) as e:
        st.toast(f"Could not save image: {e}")
        return
    st.toast("Image saved")
    st.caption(f"Saved to {path}")


# ==========================
# Config
# ==========================
st.set_page_config(
    page_title="SkyGen AI",
    page_icon="🎨",
    layout="centered"
)

if "controller" not in st.session_state:
    setup_logging(settings.LOG_LEVEL)
    st.session_state["controller"] = GenerationController()

controller: GenerationController = st.session_state["controller"]

st.markdown("<h2 style='text-align:center;letter-spacing:1px'>SkyGen AI</h2>", unsafe_allow_html=True)

# ==========================
# Result area
# ==========================
view_area = st.empty()
render(view_area, controller.state)

if select_view(controller.state) is View.IMAGE:
    if st.button("⬇️ Download Image", use_container_width=True):
        on_download(controller)

# ==========================
# Prompt input
# ==========================
prompt = st.chat_input("Type your image prompt...", disabled=controller.busy)

if prompt:
    unsubscribe = controller.subscribe(lambda state: render(view_area, state))
    try:
        with st.spinner("Creating image with AI..."):
            asyncio.run(controller.submit(prompt))
    finally:
        unsubscribe()
    st.rerun()
