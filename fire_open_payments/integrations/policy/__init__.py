"""
Normalisation of fire.com response bodies into validated models.
"""
