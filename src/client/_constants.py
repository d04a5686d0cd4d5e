CLIENT_VERSION = "0.3.0"
USER_AGENT = f"keyauth-xmlrpc/{CLIENT_VERSION}"
SESSION_FIELD = "sessid"
