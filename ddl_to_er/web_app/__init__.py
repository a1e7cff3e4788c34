"""
Flask web layer
"""
