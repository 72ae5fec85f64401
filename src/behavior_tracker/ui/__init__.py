"""Streamlit front end. Run with ``streamlit run streamlit-app/app.py``."""
