from setuptools import setup, find_packages

setup(
    name="azure-mcp-gateway",
    version="1.0.0",
    description="Azure MCP Gateway — DP-300 practice tools for Azure SQL over the Model Context Protocol",
    author="Azure MCP Gateway",
    python_requires=">=3.10",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["azure_mcp_gateway"],
    install_requires=[
        "mcp>=1.17.0,<2",
        "anyio>=4.0",
        "azure-core>=1.30.0",
        "azure-identity>=1.15.0",
        "azure-mgmt-resource>=23.0.0,<26",
        "azure-mgmt-sql>=3.0.1",
        "azure-mgmt-monitor>=6.0.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "azure-mcp-gateway=azure_mcp_gateway:main",
        ],
    },
)
