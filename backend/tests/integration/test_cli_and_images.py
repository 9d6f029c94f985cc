from __future__ import annotations

from sqlalchemy import select

from catalog.models.user import ROLE_ADMIN, ROLE_USER, User
from tests.factories.user import UserFactory


class TestUsersCreateCommand:
    def test_create_admin(self, app, session):
        runner = app.test_cli_runner()

        result = runner.invoke(
            args=["users", "create", "carol", "carol@example.com", "--admin", "--password", "s3cret!"]
        )

        assert result.exit_code == 0, result.output
        assert "Created admin 'carol'" in result.output
        session.expire_all()
        user = session.execute(select(User).where(User.username == "carol")).scalar_one()
        assert user.role == ROLE_ADMIN
        assert user.verify_password("s3cret!")

    def test_create_plain_user(self, app, session):
        result = app.test_cli_runner().invoke(
            args=["users", "create", "dave", "dave@example.com", "--password", "pw"]
        )
        assert result.exit_code == 0, result.output
        assert f"Created {ROLE_USER} 'dave'" in result.output

    def test_duplicate_fails(self, app):
        UserFactory(username="erin")
        result = app.test_cli_runner().invoke(
            args=["users", "create", "erin", "erin2@example.com", "--password", "pw"]
        )
        assert result.exit_code != 0
        assert "already exists" in result.output


class TestImages:
    def test_missing_image_is_404(self, client, session):
        assert client.get("/images/nothing-here.png").status_code == 404

    def test_traversal_is_refused(self, client, session):
        assert client.get("/images/../../etc/passwd").status_code == 404
