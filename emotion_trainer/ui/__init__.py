"""Streamlit display components"""
