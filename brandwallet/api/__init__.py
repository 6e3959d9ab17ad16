"""
API blueprints for BrandWallet.
"""
