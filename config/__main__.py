"""Command line interface for testing configuration loading"""
from . import settings_conf

HIDDEN = ('jwt_secret', 'jwt_refresh_secret')

def main():
    """Display loaded configuration"""
    print("\nSettings Configuration:")
    print("-" * 50)
    for key, value in settings_conf.items():
        if key in HIDDEN:
            value = '********'
        print(f"{key}: {value}")

if __name__ == "__main__":
    main()
