"""Security headers middleware"""

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}


def apply_security_headers(response):
    """Add the security headers to a response without overriding explicit ones"""
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response
