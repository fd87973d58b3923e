
import firebase_admin
from firebase_admin import credentials, firestore
from typing import Dict, List, Optional
import logging

from school_face.models.enrolled_identity import EnrolledIdentity

logger = logging.getLogger(__name__)

ATTENDANCE_SETTING_KEYS = ["jam_masuk", "jam_terlambat", "jam_pulang", "toleransi_menit"]


class FirebaseService:
    """Firestore access for users, enrolled faces and attendance records"""

    def __init__(self, credentials_path: str, project_id: Optional[str] = None):

        try:
            cred = credentials.Certificate(credentials_path)
            if not firebase_admin._apps:
                options = {'projectId': project_id} if project_id else None
                firebase_admin.initialize_app(cred, options)

            self.db = firestore.client()
            logger.info("Firebase initialized successfully")
        except Exception as e:
            logger.error(f"Firebase initialization failed: {str(e)}")
            raise

    def get_user(self, user_id: str) -> Optional[Dict]:
        try:
            doc = self.db.collection('users').document(user_id).get()

            if doc.exists:
                user = doc.to_dict()
                user['id'] = doc.id
                return user

            return None
        except Exception as e:
            logger.error(f"User retrieval failed: {str(e)}")
            raise

    def get_enrolled_identities(self) -> List[EnrolledIdentity]:
        """Users with a registered face, ordered by id"""
        try:
            identities = []
            for doc in self.db.collection('users').stream():
                data = doc.to_dict()
                if data.get('face_embedding') is None:
                    continue
                identities.append(EnrolledIdentity.from_user_document(doc.id, data))

            # Stable order keeps tie-breaks between equidistant faces repeatable
            identities.sort(key=lambda identity: identity.identity_id)
            return identities
        except Exception as e:
            logger.error(f"Enrolled identity retrieval failed: {str(e)}")
            raise

    def register_face(self, user_id: str, embedding: List[float]):
        try:
            self.db.collection('users').document(user_id).update({
                'face_embedding': embedding,
                'face_registered_at': firestore.SERVER_TIMESTAMP
            })
            logger.info(f"Face registered for user: {user_id}")
        except Exception as e:
            logger.error(f"Face registration failed: {str(e)}")
            raise

        # History copy; the user document above is authoritative
        try:
            self.db.collection('faces').document().set({
                'user_id': user_id,
                'embedding': embedding,
                'is_primary': True,
                'is_active': True,
                'confidence': 1.0,
                'quality_score': 0.9,
                'created_at': firestore.SERVER_TIMESTAMP
            })
        except Exception as e:
            logger.error(f"Face history storage failed: {str(e)}")

    def get_attendance_for_day(self, user_id: str, tanggal: str) -> Optional[Dict]:
        try:
            query = (
                self.db.collection('attendance')
                .where('user_id', '==', user_id)
                .where('tanggal', '==', tanggal)
                .limit(1)
            )

            for doc in query.stream():
                record = doc.to_dict()
                record['id'] = doc.id
                return record

            return None
        except Exception as e:
            logger.error(f"Attendance lookup failed: {str(e)}")
            raise

    def get_active_attendance_settings(self) -> Optional[Dict]:
        """Stored values of the active settings document, without empty fields"""
        try:
            query = self.db.collection('attendance_settings').where('is_active', '==', True).limit(1)

            for doc in query.stream():
                data = doc.to_dict()
                return {
                    k: v for k, v in data.items()
                    if k in ATTENDANCE_SETTING_KEYS and v is not None
                }

            return None
        except Exception as e:
            # Attendance still works with the configured defaults
            logger.error(f"Attendance settings retrieval failed: {str(e)}")
            return None

    def save_attendance(self, attendance_data: Dict) -> str:
        try:
            doc_ref = self.db.collection('attendance').document()
            attendance_data['created_at'] = firestore.SERVER_TIMESTAMP
            doc_ref.set(attendance_data)

            logger.info(f"Attendance saved: {doc_ref.id}")
            return doc_ref.id
        except Exception as e:
            logger.error(f"Attendance save failed: {str(e)}")
            raise
