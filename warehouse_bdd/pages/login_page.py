"""Login screen."""

from __future__ import annotations

from typing import Dict, Optional

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.support import expected_conditions as EC

from warehouse_bdd.operations import Login
from warehouse_bdd.pages.base_page import BasePage, Handler


class LoginPage(BasePage):
    """Warehouse application login page."""

    page_title = "Login"
    page_url = "/login"
    required_elements = (
        ("login.username_field", "Username field"),
        ("login.password_field", "Password field"),
        ("login.login_button", "Login button"),
    )

    def handlers(self) -> Dict[type, Handler]:
        return {Login: self.login}

    def login(self, op: Login) -> bool:
        self.enter_text("login.username_field", op.username, "Username")
        self.enter_text("login.password_field", op.password, "Password", masked=True)
        self.click("login.login_button", "Login")
        if self.is_logged_in():
            self.log.passed(f"Logged in as {op.username}", screenshot=True)
            return True
        self.log.failed(f"Login failed for {op.username}: {self.error_message() or 'no dashboard'}")
        return False

    def is_logged_in(self) -> bool:
        try:
            self.short_wait.until(
                EC.visibility_of_element_located(self._get_locator("login.dashboard"))
            )
        except TimeoutException:
            return False
        return True

    def error_message(self) -> Optional[str]:
        if not self.is_element_displayed("common.error_message"):
            return None
        return self.find("common.error_message").text.strip()
