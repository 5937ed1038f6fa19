from __future__ import annotations

import streamlit as st

APP_CSS = r"""
/* Compact debug-panel look for the sidebar */
[data-testid="stSidebar"] {
  background: #15171c;
}

[data-testid="stSidebar"] label,
[data-testid="stSidebar"] p {
  font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace;
  font-size: 0.82rem;
}

[data-testid="stSidebar"] [data-testid="stExpander"] {
  border: 1px solid rgba(255, 255, 255, 0.10);
  border-radius: 6px;
}

/* Read-only renderer fields */
[data-testid="stSidebar"] input:disabled {
  color: rgba(255, 255, 255, 0.75);
  -webkit-text-fill-color: rgba(255, 255, 255, 0.75);
}

h1 {
  letter-spacing: -0.02em;
}
"""


def inject_global_styles() -> None:
    st.markdown(f"<style>{APP_CSS}</style>", unsafe_allow_html=True)
