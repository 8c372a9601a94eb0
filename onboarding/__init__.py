"""
Onboarding Module for Split Payments
Domain: Merchant application flow over MCP

Endpoints:
- POST /mcp  (JSON-RPC tool protocol, optional API key)
- GET  /mcp  (health)
"""
