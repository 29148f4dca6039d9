#!/usr/bin/env python3
"""
Production runner for the errand route planner
- Serves the Flask API (server.app)
- Loads .env for GOOGLE_MAPS_API_KEY and other settings

Usage:
  python3 run_prod.py

Environment:
  PORT=8000 (default)          # Port to bind
  HOST=0.0.0.0 (default)       # Host interface
  GOOGLE_MAPS_API_KEY=...      # Required for route planning
  MAX_CONCURRENT_REQUESTS=10   # optional: cap on simultaneous Google Maps calls
  TRAVEL_MODE=driving          # optional: driving | walking | bicycling | transit
"""

import os
import ssl

from werkzeug.middleware.proxy_fix import ProxyFix

from server.app import app as api_app, config

# Respect reverse proxy headers (X-Forwarded-*) when behind a proxy/HTTPS terminator
if os.getenv('TRUST_PROXY_HEADERS', '1') not in ('0', 'false', 'False', 'no', 'off'):
    # Trust a single proxy hop by default; tune via env
    x_for = int(os.getenv('PROXY_FIX_X_FOR', '1'))
    x_proto = int(os.getenv('PROXY_FIX_X_PROTO', '1'))
    x_host = int(os.getenv('PROXY_FIX_X_HOST', '1'))
    x_port = int(os.getenv('PROXY_FIX_X_PORT', '1'))
    x_prefix = int(os.getenv('PROXY_FIX_X_PREFIX', '1'))
    api_app.wsgi_app = ProxyFix(api_app.wsgi_app, x_for=x_for, x_proto=x_proto, x_host=x_host, x_port=x_port, x_prefix=x_prefix)
application = api_app


def main():
    host = os.getenv('HOST', '0.0.0.0')
    try:
        port = int(os.getenv('PORT', '8000'))
    except ValueError:
        port = 8000

    if not config.has_api_key:
        print("\n" + "="*60)
        print("Warning: GOOGLE_MAPS_API_KEY is not configured.")
        print("The API will start, but /api/go will answer with an error.")
        print("Set it in your environment or .env file.")
        print("="*60 + "\n")

    ssl_cert = os.getenv('SSL_CERTFILE') or os.getenv('SSL_CERT')
    ssl_key = os.getenv('SSL_KEYFILE') or os.getenv('SSL_KEY')

    if ssl_cert and ssl_key:
        print(f"\n🔐 Starting errand route planner (prod) on https://{host}:{port}")
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(certfile=ssl_cert, keyfile=ssl_key)

        # Use Werkzeug's run_simple to serve HTTPS directly
        from werkzeug.serving import run_simple
        run_simple(hostname=host, port=port, application=application, ssl_context=context, threaded=True)
    else:
        print(f"\n🚀 Starting errand route planner (prod) on http://{host}:{port}")
        print(" - API: /api/go")

        # Prefer waitress if available; otherwise use Werkzeug's run_simple
        try:
            from waitress import serve  # type: ignore
        except ImportError:
            print("[warn] waitress not available; using Werkzeug server")
            from werkzeug.serving import run_simple
            run_simple(hostname=host, port=port, application=application, threaded=True)
        else:
            print("Using waitress WSGI server")
            serve(application, host=host, port=port, threads=int(os.getenv('WSGI_THREADS', '8')))


if __name__ == '__main__':
    main()
