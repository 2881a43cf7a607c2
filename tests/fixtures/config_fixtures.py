"""
Configuration test fixtures for the test suite.

Contains configuration samples for testing the Fedora client, the
migration settings and the CLI.
"""

SAMPLE_CONFIG = {
    "fedora": {
        "base_url": "http://localhost:8080/rest",
        "username": "fedoraAdmin",
        "password": "secret",
        "timeout": 10,
        "verify_ssl": False
    },
    "migration": {
        "source_dir": "export",
        "root_path": "/migrated",
        "import_external": False,
        "import_redirect": True,
        "limit": 25
    },
    "logging": {
        "level": "DEBUG",
        "file": "logs/test.log"
    }
}

MINIMAL_CONFIG = {
    "fedora": {
        "base_url": "http://localhost:8080/rest"
    },
    "migration": {
        "source_dir": "export"
    }
}

INVALID_CONFIGS = {
    "bad_base_url": {"fedora": {"base_url": "ftp://example.org/rest"}},
    "bad_timeout": {"fedora": {"base_url": "http://localhost:8080/rest", "timeout": "soon"}},
    "bad_limit": {"migration": {"limit": "ten"}},
    "bool_limit": {"migration": {"limit": True}},
    "bad_flag": {"migration": {"import_external": "yes"}},
    "bad_section": {"migration": ["source_dir"]},
}
