"""
Normalisation of Search Console site identifiers and page URLs.
"""

SCHEMES = ('http://', 'https://')
DOMAIN_PREFIX = 'sc-domain:'


def canonicalize_site(value):
    """Adds https:// to a bare host name. Domain properties are left as-is."""
    if value.startswith(SCHEMES) or value.startswith(DOMAIN_PREFIX):
        return value
    return 'https://' + value


def strip_site_prefix(page_url, site_url):
    """Returns the page URL relative to the site, e.g. /blog/a."""
    prefix = site_url.rstrip('/')
    if page_url.startswith(prefix):
        return page_url[len(prefix):]
    return page_url


def absolute_page_url(page, site_url):
    """Joins a page path to a URL-prefix property; absolute URLs pass through."""
    if page.startswith(SCHEMES) or site_url.startswith(DOMAIN_PREFIX):
        return page
    return site_url.rstrip('/') + '/' + page.lstrip('/')
