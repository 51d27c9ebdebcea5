"""Main entry point for the Calculator MCP Server."""

from calculator_mcp.server.mcp_server import main

if __name__ == "__main__":
    main()
