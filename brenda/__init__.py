"""
Brenda - voice and text assistant backed by the OpenAI Realtime API

The backend issues short-lived session tokens, exchanges them for single-use
realtime keys and relays text chat; the client side talks to the provider
directly over WebRTC with the ephemeral key.

Architecture Overview:
- FastAPI server exposing /session, /realtime-key and /chat
- Signed session tokens gating access to provider-issued ephemeral keys
- WebRTC transport client (aiortc) with a data channel for control events
- One locale table shared by the text persona and the spoken instructions

Key Components:
- bot: Voice transport client, response gate, media helpers, text chat
- config: Constants, environment-backed settings and logging setup
- handlers: HTTP request handlers
- models: Request/response schemas, token claims, transport events, chat history
- services: Token codec, session minting, key exchange, chat relay, HTTP clients
- locales: Supported locale variants and their persona text

Getting Started:
1. Set up environment variables:
   - OPENAI_API_KEY: Your OpenAI API key
   - VOICE_SESSION_SECRET: Secret used to sign session tokens
   - PORT / HOST / LOG_LEVEL: Server settings (defaults 8000 / 0.0.0.0 / INFO)

2. Start the server:
   ```bash
   python run.py
   ```

3. Talk or type from the command line:
   ```bash
   python client.py talk --locale es-ES
   python client.py text
   ```
"""
