"""
Price window and trade signal models.
"""
