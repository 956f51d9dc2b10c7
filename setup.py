from setuptools import setup, find_packages

setup(
    name="vpnstatus",
    version="0.1.0",
    packages=find_packages(include=["vpnstatus", "vpnstatus.*"]),
    include_package_data=True,
    install_requires=[
        "click",
        "psutil",
        "pyobjc-framework-SystemConfiguration; sys_platform == 'darwin'",
        "toml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "vpnstatus=vpnstatus.cli:cli",
        ],
    },
    python_requires=">=3.10",
    author="VPNStatus Contributors",
    description="VPN detection and public location monitor",
    long_description="Detects active VPN tunnels from the host's network interfaces, follows network path changes and reports the public IP location reached through the tunnel.",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: MacOS X",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Networking",
        "Topic :: System :: Networking :: Monitoring",
    ],
)
