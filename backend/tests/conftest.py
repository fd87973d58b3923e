
import pytest
from fastapi.testclient import TestClient

from school_face.main import app
from school_face.models.enrolled_identity import EnrolledIdentity


class FakeFirebaseService:
    """In-memory stand-in for the Firestore service"""

    def __init__(self, users=None, attendance_settings=None):
        self.users = users or {}
        self.faces = []
        self.attendance = {}
        self.attendance_settings = attendance_settings
        self.directory_error = None

    def get_user(self, user_id):
        if user_id not in self.users:
            return None
        return {**self.users[user_id], 'id': user_id}

    def get_enrolled_identities(self):
        if self.directory_error is not None:
            raise self.directory_error
        return [
            EnrolledIdentity.from_user_document(user_id, data)
            for user_id, data in sorted(self.users.items())
            if data.get('face_embedding') is not None
        ]

    def register_face(self, user_id, embedding):
        self.users[user_id]['face_embedding'] = list(embedding)
        self.faces.append({'user_id': user_id, 'embedding': list(embedding)})

    def get_attendance_for_day(self, user_id, tanggal):
        for attendance_id, record in self.attendance.items():
            if record['user_id'] == user_id and record['tanggal'] == tanggal:
                return {**record, 'id': attendance_id}
        return None

    def get_active_attendance_settings(self):
        return self.attendance_settings

    def save_attendance(self, attendance_data):
        attendance_id = f"att-{len(self.attendance) + 1}"
        self.attendance[attendance_id] = dict(attendance_data)
        return attendance_id


@pytest.fixture
def fake_store():
    return FakeFirebaseService(users={
        'u-siswa': {
            'nama': 'Budi Santoso',
            'role': 'siswa',
            'nisn': '0012345678',
            'face_embedding': [0.0, 0.0]
        },
        'u-guru': {
            'nama': 'Siti Rahma',
            'role': 'guru',
            'face_embedding': [1.0, 1.0]
        },
        'u-baru': {
            'nama': 'Andi Wijaya',
            'role': 'siswa',
            'nisn': '0087654321'
        },
    })


@pytest.fixture
def client(fake_store):
    with TestClient(app) as test_client:
        app.state.firebase_service = fake_store
        yield test_client
