"""UI subpackage - Streamlit page, application state and controller."""
