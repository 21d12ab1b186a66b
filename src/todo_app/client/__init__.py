"""
Client side of the HTTP API.

- api_client.py: async httpx client, unwraps response envelopes
- controller.py: client state (tasks, stats, filters, connectivity) and health polling
"""
