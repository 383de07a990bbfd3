"""
Test utilities package for langfill tests.

### test_helpers.py
- `FakeTranslator`: recording stand-in for the external translate call
- `create_temp_config_file()`: Context manager for temporary YAML config files
"""
