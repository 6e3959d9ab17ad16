"""
BrandWallet service entry point.
"""
import os
import sys
import traceback

# Default to production for container deployment
config_name = os.getenv('FLASK_ENV', 'production')
print(f"[BrandWallet] Config: {config_name}")
print(f"[BrandWallet] DATABASE_URL: {'set' if os.getenv('DATABASE_URL') else 'NOT SET'}")

try:
    from brandwallet import create_app
    app = create_app(config_name)
    print(f"[BrandWallet] Routes: {len(list(app.url_map.iter_rules()))}")
except Exception as e:
    print(f"[BrandWallet] FATAL ERROR during app creation: {e}")
    traceback.print_exc()
    sys.exit(1)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('FLASK_ENV') == 'development'
    )
