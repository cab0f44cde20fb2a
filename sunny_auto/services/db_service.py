from supabase import create_async_client, AsyncClient
from sunny_auto.core.config import settings
from sunny_auto.models.profile import Account
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger("sunny_auto")


class DBService:
    """
    Thin async wrapper over the Supabase client.
    Every call logs and swallows backend errors: reads return [] / None, writes return False.
    """
    _instance = None
    _client: AsyncClient = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(DBService, cls).__new__(cls)
            # Async client is created lazily on first use
        return cls._instance

    async def get_client(self):
        if not self._client:
            try:
                if settings.SUPABASE_URL and settings.SUPABASE_KEY:
                    self._client = await create_async_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
                    logger.info("✅ Supabase Async client initialized")
                else:
                    logger.warning("⚠️ Supabase credentials missing")
            except Exception as e:
                logger.error(f"❌ Failed to initialize Supabase Async: {e}")
        return self._client

    # --- Auth ---

    async def get_account(self, jwt: str) -> Optional[Account]:
        """Resolves a session token into the auth user (id, email, metadata)."""
        client = await self.get_client()
        if not client:
            return None

        try:
            response = await client.auth.get_user(jwt)
            user = response.user if response else None
            if user and user.id and user.email:
                return Account(id=user.id, email=user.email, user_metadata=user.user_metadata or {})
        except Exception as e:
            logger.error(f"❌ Auth Error (get_account): {e}")
        return None

    # --- Appointments ---

    async def fetch_appointments(self) -> List[Dict[str, Any]]:
        """
        Reads every appointment row, newest preferred date first.
        """
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table(settings.APPOINTMENTS_TABLE)\
                .select("*")\
                .order('preferred_date', desc=True)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (fetch_appointments): {e}")
            return []

    async def update_appointment(self, appointment_id: str, changes: Dict[str, Any]) -> bool:
        """Single-row update by id. No version check, last writer wins."""
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table(settings.APPOINTMENTS_TABLE).update(changes).eq('id', appointment_id).execute()
            logger.info(f"✅ Appointment {appointment_id} updated: {sorted(changes)}")
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (update_appointment): {e}")
            return False

    # --- Profiles ---

    async def get_profile(self, table: str, account_id: str) -> Optional[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return None

        try:
            response = await client.table(table).select("*").eq('id', account_id).execute()
            if response.data:
                return response.data[0]
        except Exception as e:
            logger.error(f"❌ DB Error (get_profile): {e}")
        return None

    async def insert_profile(self, table: str, profile: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return None

        try:
            response = await client.table(table).insert(profile).execute()
            if response.data:
                logger.info(f"🆕 New profile created in {table}: {profile.get('email')}")
                return response.data[0]
        except Exception as e:
            logger.error(f"❌ DB Error (insert_profile): {e}")
        return None

    async def update_profile(self, table: str, account_id: str, changes: Dict[str, Any]) -> bool:
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table(table).update(changes).eq('id', account_id).execute()
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (update_profile): {e}")
            return False

    async def list_profiles(self, table: str) -> List[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table(table).select("*").order('created_at', desc=True).execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (list_profiles): {e}")
            return []

    # --- Object storage ---

    async def upload_file(self, path: str, content: bytes, content_type: str) -> Optional[str]:
        """
        Uploads a blob into the storage bucket and returns its public URL.
        """
        client = await self.get_client()
        if not client:
            return None

        try:
            bucket = client.storage.from_(settings.STORAGE_BUCKET)
            await bucket.upload(path, content, {"content-type": content_type})
            url = await bucket.get_public_url(path)
            logger.info(f"📦 Uploaded {path} to bucket '{settings.STORAGE_BUCKET}'")
            return url
        except Exception as e:
            logger.error(f"❌ Storage Error (upload_file): {e}")
            return None

    # --- Services catalog ---

    async def fetch_available_services(self) -> List[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table(settings.SERVICES_TABLE)\
                .select("*")\
                .eq('is_available', True)\
                .order('created_at', desc=True)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (fetch_available_services): {e}")
            return []

    async def list_services(self) -> List[Dict[str, Any]]:
        """Every service, available or not, newest first."""
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table(settings.SERVICES_TABLE)\
                .select("*")\
                .order('created_at', desc=True)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (list_services): {e}")
            return []

    async def get_service(self, service_id: str) -> Optional[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return None

        try:
            response = await client.table(settings.SERVICES_TABLE).select("*").eq('id', service_id).execute()
            if response.data:
                return response.data[0]
        except Exception as e:
            logger.error(f"❌ DB Error (get_service): {e}")
        return None

    async def insert_service(self, service: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return None

        try:
            response = await client.table(settings.SERVICES_TABLE).insert(service).execute()
            if response.data:
                logger.info(f"🆕 Service added: {service.get('name')}")
                return response.data[0]
        except Exception as e:
            logger.error(f"❌ DB Error (insert_service): {e}")
        return None

    async def update_service(self, service_id: str, changes: Dict[str, Any]) -> bool:
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table(settings.SERVICES_TABLE).update(changes).eq('id', service_id).execute()
            logger.info(f"✅ Service {service_id} updated")
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (update_service): {e}")
            return False

    async def delete_service(self, service_id: str) -> bool:
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table(settings.SERVICES_TABLE).delete().eq('id', service_id).execute()
            logger.info(f"🗑️ Service {service_id} deleted.")
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (delete_service): {e}")
            return False

    # --- Rewards ---

    async def get_user_rewards(self, user_id: str) -> Optional[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return None

        try:
            response = await client.table('user_rewards').select("*").eq('user_id', user_id).execute()
            if response.data:
                return response.data[0]
        except Exception as e:
            logger.error(f"❌ DB Error (get_user_rewards): {e}")
        return None

    async def list_points_transactions(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table('points_transactions')\
                .select("*")\
                .eq('user_id', user_id)\
                .order('created_at', desc=True)\
                .limit(limit)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (list_points_transactions): {e}")
            return []

    async def list_redeemed_rewards(self, user_id: str) -> List[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table('redeemed_rewards')\
                .select("*")\
                .eq('user_id', user_id)\
                .order('redeemed_at', desc=True)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (list_redeemed_rewards): {e}")
            return []

    async def save_points(self, user_id: str, total_points: int, lifetime_points: int, updated_at: str) -> bool:
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table('user_rewards').upsert({
                'user_id': user_id,
                'total_points': total_points,
                'lifetime_points': lifetime_points,
                'updated_at': updated_at,
            }).execute()
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (save_points): {e}")
            return False

    async def insert_row(self, table: str, row) -> bool:
        """Plain insert of one row (or a list of rows)."""
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table(table).insert(row).execute()
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (insert_row into {table}): {e}")
            return False

    # --- Notifications ---

    async def list_notifications(self) -> List[Dict[str, Any]]:
        client = await self.get_client()
        if not client:
            return []

        try:
            response = await client.table(settings.NOTIFICATIONS_TABLE)\
                .select("*")\
                .order('created_at', desc=True)\
                .execute()
            return response.data or []
        except Exception as e:
            logger.error(f"❌ DB Error (list_notifications): {e}")
            return []

    async def delete_notification(self, notification_id: str) -> bool:
        client = await self.get_client()
        if not client:
            return False

        try:
            await client.table(settings.NOTIFICATIONS_TABLE).delete().eq('id', notification_id).execute()
            logger.info(f"🗑️ Notification {notification_id} deleted.")
            return True
        except Exception as e:
            logger.error(f"❌ DB Error (delete_notification): {e}")
            return False

db_service = DBService()
