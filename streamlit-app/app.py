"""Streamlit entry point for the Behavior Tracker dashboard.

Run with: streamlit run streamlit-app/app.py
"""

from behavior_tracker.ui.app import main

if __name__ == "__main__":
    main()
