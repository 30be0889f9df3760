#!/usr/bin/env python3
"""
Setup validation script for Table Scanner.

Checks all system requirements and provides guidance for missing components.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


def print_header(text: str):
    """Print a formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {text}")
    print('=' * 60)


def print_check(name: str, status: bool, message: str = ""):
    """Print a check result."""
    icon = "✅" if status else "❌"
    print(f"{icon} {name}: {message}")


def print_info(message: str):
    """Print an info message."""
    print(f"ℹ️  {message}")


def check_python_version():
    """Check Python version."""
    print_header("Python Version")

    version = sys.version_info
    required = (3, 9)

    is_ok = version >= required
    print_check(
        "Python",
        is_ok,
        f"{version.major}.{version.minor}.{version.micro} "
        f"({'OK' if is_ok else f'requires {required[0]}.{required[1]}+'})"
    )

    return is_ok


def check_python_packages():
    """Check required Python packages."""
    print_header("Python Packages")

    # Import name -> distribution name
    required_packages = {
        "streamlit": "streamlit",
        "PIL": "Pillow",
        "openpyxl": "openpyxl",
        "pandas": "pandas",
        "requests": "requests",
        "dotenv": "python-dotenv",
    }

    all_ok = True

    for import_name, display_name in required_packages.items():
        try:
            __import__(import_name)
            print_check(display_name, True, "Installed")
        except ImportError:
            print_check(display_name, False, "Not installed")
            all_ok = False

    if not all_ok:
        print_info("\nInstall missing packages with:")
        print_info("  pip install -e .")

    return all_ok


def check_api_key():
    """Check for a stored Gemini API key and that it is accepted."""
    print_header("Gemini API Key")

    from tablescan.config import GeminiConfig, get_config
    from tablescan.storage.credentials import CredentialStore

    config = get_config()
    store = CredentialStore(config=config.storage)
    api_key = store.load()

    if not api_key:
        print_check("Stored key", False, f"None in {store.path}")
        print_info("The key is requested on first start of the app.")
        return False

    print_check("Stored key", True, f"Found in {store.path}")

    ok, message = GeminiConfig.validate_connection(api_key, config.gemini.base_url)
    print_check("Gemini API", ok, message)
    return ok


def main():
    """Run all checks."""
    print("\n" + "=" * 60)
    print("  Table Scanner - Setup Validation")
    print("=" * 60)

    results = {}

    results["python"] = check_python_version()
    results["packages"] = check_python_packages()
    results["api_key"] = check_api_key() if results["packages"] else False

    # Summary
    print_header("Summary")

    critical_ok = results["python"] and results["packages"]

    if critical_ok:
        print("✅ System is ready to run the application!")
        if not results["api_key"]:
            print("   (You will be asked for a Gemini API key on start.)")
        print("\nStart with:")
        print("  streamlit run tablescan/main.py")
    else:
        print("❌ Some requirements are missing:")

        if not results["python"]:
            print("  - Python 3.9+ required")
        if not results["packages"]:
            print("  - Some Python packages missing (run: pip install -e .)")

    print()
    return 0 if critical_ok else 1


if __name__ == "__main__":
    sys.exit(main())
