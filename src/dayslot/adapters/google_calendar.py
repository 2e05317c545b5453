"""Google Calendar API adapter."""

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from dayslot.core.calendar import Event

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.events"]


class GoogleCalendarAdapter:
    """
    Reads and writes events on one Google calendar.

    Implements CalendarSync protocol.
    """

    def __init__(
        self,
        config_folder: Path | str,
        calendar_id: str = "primary",
        client_secret_file: str = "",
        timezone: str = "America/Toronto",
    ):
        self.config_folder = Path(config_folder).expanduser()
        self.calendar_id = calendar_id
        self.client_secret_file = client_secret_file
        self.timezone = timezone
        self._token_path = self.config_folder / "token.json"

    def _get_credentials(self):
        """Load credentials from token.json, refreshing if needed."""
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if not self._token_path.exists():
            logger.warning("No Google token.json; run 'dayslot cal-auth'")
            return None

        creds = Credentials.from_authorized_user_file(str(self._token_path), SCOPES)

        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
                self._token_path.write_text(creds.to_json())
                self._token_path.chmod(0o600)
            except Exception as e:
                logger.warning(f"Failed to refresh Google token: {e}")
                return None

        return creds

    def _build_service(self):
        """Build a Google Calendar API service."""
        from googleapiclient.discovery import build

        creds = self._get_credentials()
        if not creds:
            return None
        return build("calendar", "v3", credentials=creds)

    def authenticate(self) -> bool:
        """Run OAuth flow. Returns True on success."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        if not self.client_secret_file:
            logger.error("No client secret file configured")
            return False

        secret_path = Path(self.client_secret_file).expanduser()
        if not secret_path.exists():
            logger.error(f"Client secret file not found: {secret_path}")
            return False

        flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
        creds = flow.run_local_server(port=0)

        self.config_folder.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        self._token_path.chmod(0o600)
        return True

    def fetch_day(self, target_date: date) -> list[Event]:
        """Fetch events for a specific date. API errors yield no events."""
        try:
            return self._fetch_day_api(target_date)
        except Exception as e:
            logger.warning(f"Google Calendar API error: {e}")
            return []

    def _fetch_day_api(self, target_date: date) -> list[Event]:
        service = self._build_service()
        if not service:
            return []

        tz = ZoneInfo(self.timezone)
        time_min = datetime(target_date.year, target_date.month, target_date.day, tzinfo=tz)
        time_max = time_min + timedelta(days=1)

        result = (
            service.events()
            .list(
                calendarId=self.calendar_id,
                timeMin=time_min.isoformat(),
                timeMax=time_max.isoformat(),
                singleEvents=True,
                orderBy="startTime",
                timeZone=self.timezone,
            )
            .execute()
        )

        events = []
        for item in result.get("items", []):
            start_raw = item.get("start", {})
            end_raw = item.get("end", {})

            if "date" in start_raw:
                start_dt = datetime.fromisoformat(start_raw["date"]).replace(tzinfo=tz)
                end_dt = datetime.fromisoformat(end_raw["date"]).replace(tzinfo=tz) if "date" in end_raw else None
                all_day = True
            elif "dateTime" in start_raw:
                # Convert to local wall time so minute-of-day math matches the planner
                start_dt = datetime.fromisoformat(start_raw["dateTime"]).astimezone(tz)
                end_dt = datetime.fromisoformat(end_raw["dateTime"]).astimezone(tz) if "dateTime" in end_raw else None
                all_day = False
            else:
                continue

            events.append(
                Event(
                    title=item.get("summary", "Untitled"),
                    start=start_dt,
                    end=end_dt,
                    location=item.get("location", ""),
                    all_day=all_day,
                    source="google_calendar",
                    external_id=item.get("id"),
                )
            )

        return events

    def create_event(self, event: Event) -> str | None:
        """Insert an event. Returns the Google event id. Raises on API errors."""
        service = self._build_service()
        if not service:
            raise RuntimeError("Google Calendar is not authenticated")

        tz = ZoneInfo(self.timezone)
        start = event.start if event.start.tzinfo else event.start.replace(tzinfo=tz)
        end = event.end or start
        if not end.tzinfo:
            end = end.replace(tzinfo=tz)

        body = {
            "summary": event.title,
            "start": {"dateTime": start.isoformat(), "timeZone": self.timezone},
            "end": {"dateTime": end.isoformat(), "timeZone": self.timezone},
        }
        if event.location:
            body["location"] = event.location

        created = service.events().insert(calendarId=self.calendar_id, body=body).execute()
        return created.get("id")

    def delete_event(self, external_id: str) -> None:
        """Delete an event by Google id. An already-deleted event counts as success."""
        from googleapiclient.errors import HttpError

        service = self._build_service()
        if not service:
            raise RuntimeError("Google Calendar is not authenticated")

        try:
            service.events().delete(calendarId=self.calendar_id, eventId=external_id).execute()
        except HttpError as e:
            if e.resp.status in (404, 410):
                logger.info(f"Google event {external_id} already gone")
                return
            raise
