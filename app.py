import streamlit as st
from dotenv import load_dotenv
from src.utils.config import AppConfig
from src.utils.logger import setup_logger
from src.session.app_state import AppState
from src.session.controller import ReviewController
from src.ui.components import header, credential_gate, sidebar, upload_panel, analysis_panel, chat_panel

load_dotenv()
config = AppConfig.from_env()
setup_logger(level=config.log_level)

st.set_page_config(page_title="SupplyChain Guard", layout="wide", page_icon="🛡️")

if 'app_state' not in st.session_state:
    st.session_state.app_state = AppState()
controller = ReviewController(config, st.session_state.app_state)

header(config)

if not credential_gate(controller):
    st.stop()

sidebar(controller)

left, right = st.columns([1, 2], gap="large")
with left:
    upload_panel(controller)
    st.divider()
    analysis_panel(controller)
with right:
    chat_panel(controller)
