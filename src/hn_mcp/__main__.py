from hn_mcp.server import main

main()
