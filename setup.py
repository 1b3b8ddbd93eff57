# Packaging for the MikroTik RouterOS exporter. Installs the mikrotik_exporter
# package and the mikrotik-exporter command.

from setuptools import find_packages, setup

setup(
    name="mikrotik-exporter",
    version="1.0.0",
    description="Prometheus exporter for MikroTik RouterOS devices",
    packages=find_packages(include=["mikrotik_exporter", "mikrotik_exporter.*"]),
    python_requires=">=3.10",
    install_requires=[
        "dnspython>=2.0",
        "flask",
        "gunicorn",
        "librouteros>=3.2",
        "prometheus_client",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "mikrotik-exporter=mikrotik_exporter.server:main",
        ],
    },
)
