#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tradebot.config.loader import ConfigLoader
from tradebot.config.validation import ConfigValidator
from tradebot.errors import ConfigurationError


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate tradebot configuration")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding tradebot.yaml and .env")
    parser.add_argument("--check-credentials", action="store_true",
                        help="Also require the exchange API keys")
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating tradebot configuration in {loader.config_dir}...")

    try:
        merged = loader.merge_config()
    except ConfigurationError as e:
        print(f"❌ {e}")
        sys.exit(1)

    errors = ConfigValidator.validate_config(merged)
    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    config = loader.load_config()
    print(f"✅ Market {config.exchange.market}, "
          f"cycle every {config.controller.interval_seconds}s, "
          f"window {config.window.capacity} "
          f"(needs {config.strategy.min_data_points} samples)")

    if args.check_credentials:
        try:
            loader.load_credentials()
        except ConfigurationError as e:
            print(f"❌ {e}")
            sys.exit(1)
        print("✅ Exchange credentials present")

    print("\n🎉 Configuration validation passed!")
    sys.exit(0)


if __name__ == "__main__":
    main()
