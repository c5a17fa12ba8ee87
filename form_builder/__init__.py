"""JSON form builder: schema validation and dynamic form rendering for Streamlit."""

__version__ = "1.0.0"
