"""
Services module for token handling and provider integrations.

Key components:
- token_codec: Signs and verifies compact HS256 session tokens, reporting
  malformed, badly signed and expired tokens as distinct errors.
- session_minting: Issues session tokens with a fixed lifetime.
- ephemeral_keys: Verifies a session token and obtains a single-use realtime
  key from the provider on the caller's behalf.
- chat_relay: Prepends the locale persona to a conversation and forwards it
  to the provider's text endpoint.
- openai_client: HTTP calls to the provider, run on worker threads.
- backend_client: Client for the Brenda endpoints, used by the voice transport
  client and the text chat front-end.

Usage examples:
```python
from brenda.services.session_minting import mint_session_token
from brenda.services.token_codec import verify

token, ttl = mint_session_token("user-42", secret)
claims = verify(token, secret)
assert claims.user_id == "user-42"
```
"""

# Services module initialization
