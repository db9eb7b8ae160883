"""
FastAPI surface: a webhook router and a demo receiver app.
"""
