"""
Access to the Google Search Console API.

Credentials are discovered once, outside the reporting code, and the built API
resource is wrapped by ``SearchConsoleService``. Both service-account key files
and OAuth client secret files are accepted; for the latter the browser consent
flow runs once and the resulting token is cached in ``token.json``.
"""
import glob
import json
import os
import sys

from google.auth import exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from gsc_analytics import rows_to_frame
from gsc_errors import CredentialsError, ServiceError

# --- Configuration ---
SCOPES = ['https://www.googleapis.com/auth/webmasters.readonly']
TOKEN_FILE = 'token.json'
CREDENTIALS_ENV_VAR = 'GOOGLE_APPLICATION_CREDENTIALS'
CWD_CREDENTIALS_PATTERN = 'search-console-*.json'
HOME_CREDENTIALS_FILE = '.search-console.json'
ROW_LIMIT = 25000


def find_credentials_file(explicit=None, environ=None, cwd=None, home=None):
    """
    Locates the credentials file to use, in order: the explicit -c file, the
    file named by GOOGLE_APPLICATION_CREDENTIALS, search-console-*.json in the
    working directory, then ~/.search-console.json.
    """
    if explicit:
        if not os.path.isfile(explicit):
            raise CredentialsError(f"credentials file not found: {explicit}")
        return explicit

    environ = os.environ if environ is None else environ
    env_path = environ.get(CREDENTIALS_ENV_VAR)
    if env_path:
        if not os.path.isfile(env_path):
            raise CredentialsError(f"{CREDENTIALS_ENV_VAR} points to a missing file: {env_path}")
        return env_path

    matches = sorted(glob.glob(os.path.join(cwd or os.getcwd(), CWD_CREDENTIALS_PATTERN)))
    if matches:
        return matches[0]

    home_file = os.path.join(home or os.path.expanduser('~'), HOME_CREDENTIALS_FILE)
    if os.path.isfile(home_file):
        return home_file

    raise CredentialsError(
        f"no credentials found: pass -c FILE, set {CREDENTIALS_ENV_VAR}, "
        f"or provide {CWD_CREDENTIALS_PATTERN} or ~/{HOME_CREDENTIALS_FILE}"
    )


def get_user_credentials(client_secret_file, token_file=TOKEN_FILE):
    """Runs the OAuth installed-app flow, reusing and refreshing a cached token."""
    creds = None
    if os.path.exists(token_file):
        try:
            creds = Credentials.from_authorized_user_file(token_file, SCOPES)
        except ValueError as e:
            print(f"Could not load credentials from {token_file}. Error: {e}", file=sys.stderr)
            creds = None

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            try:
                print("Credentials have expired. Attempting to refresh...", file=sys.stderr)
                creds.refresh(Request())
            except exceptions.RefreshError as e:
                print(f"Error refreshing token: {e}\nDeleting token and re-authenticating.", file=sys.stderr)
                os.remove(token_file)
                creds = None

        if not creds:
            print("A browser window will open for you to authorize access.", file=sys.stderr)
            flow = InstalledAppFlow.from_client_secrets_file(client_secret_file, SCOPES)
            creds = flow.run_local_server(port=0)

        with open(token_file, 'w') as token:
            token.write(creds.to_json())

    return creds


def load_credentials(path):
    """Loads service-account or OAuth client credentials from a JSON file."""
    try:
        with open(path) as f:
            info = json.load(f)
    except (OSError, ValueError) as e:
        raise CredentialsError(f"could not read credentials from {path}: {e}")

    if not isinstance(info, dict):
        raise CredentialsError(f"unrecognised credentials file: {path}")
    if info.get('type') == 'service_account':
        try:
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        except ValueError as e:
            raise CredentialsError(f"invalid service account file {path}: {e}")
    if 'installed' in info or 'web' in info:
        try:
            return get_user_credentials(path)
        except exceptions.GoogleAuthError as e:
            raise CredentialsError(f"could not authorize with {path}: {e}")
    raise CredentialsError(f"unrecognised credentials file: {path}")


class SearchConsoleService:
    """The three Search Console calls the reports need."""

    def __init__(self, resource):
        self.resource = resource

    @classmethod
    def from_credentials_file(cls, path):
        creds = load_credentials(path)
        return cls(build('searchconsole', 'v1', credentials=creds, cache_discovery=False))

    def list_sites(self):
        try:
            site_list = self.resource.sites().list().execute()
        except (HttpError, exceptions.GoogleAuthError) as e:
            raise ServiceError(f"could not list sites: {e}")
        return [entry['siteUrl'] for entry in site_list.get('siteEntry', [])]

    def list_sitemaps(self, site_url):
        try:
            response = self.resource.sitemaps().list(siteUrl=site_url).execute()
        except (HttpError, exceptions.GoogleAuthError) as e:
            raise ServiceError(f"could not list sitemaps for {site_url}: {e}")
        return [entry['path'] for entry in response.get('sitemap', [])]

    def query(self, site_url, dimensions, start_date, end_date, filters=None):
        """Runs one search analytics query and returns its rows as a DataFrame."""
        print(f"Fetching data for dimensions: {', '.join(dimensions)} from {start_date} to {end_date}...",
              file=sys.stderr)
        request_body = {
            'startDate': start_date,
            'endDate': end_date,
            'dimensions': list(dimensions),
            'dataState': 'all',
            'rowLimit': ROW_LIMIT,
        }
        if filters:
            request_body['dimensionFilterGroups'] = [{'filters': filters}]

        try:
            response = self.resource.searchanalytics().query(siteUrl=site_url, body=request_body).execute()
        except (HttpError, exceptions.GoogleAuthError) as e:
            raise ServiceError(f"query for {site_url} from {start_date} to {end_date} failed: {e}")
        return rows_to_frame(response.get('rows', []), dimensions)
