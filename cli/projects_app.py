"""
ProjectsApp - numbered console menu over ProjectService.

Keeps the currently selected project between menu choices; everything else
is delegated to the service. Errors from any operation are shown and the
loop carries on.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal, InvalidOperation

from database.exceptions import DbError
from database.projects_service import ProjectService
from models.project import Project, to_fixed_point
from utils.logger import Logger
from utils.sentry import capture_exception

OPERATIONS: list[str] = [
    "1) Add a project",
    "2) List projects",
    "3) Select a project",
    "4) Update project details",
    "5) Delete a project",
]


class InvalidInputError(ValueError):
    """Raised when console input cannot be converted to the expected type."""


class ProjectsApp:
    """Interactive menu loop"""

    def __init__(
        self,
        service: ProjectService | None = None,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ):
        self.service = service or ProjectService()
        self.input_func = input_func
        self.output = output_func
        self.logger = Logger()
        self.cur_project: Project | None = None
        self._actions: dict[int, Callable[[], None]] = {
            1: self.create_project,
            2: self.list_projects,
            3: self.select_project,
            4: self.update_project_details,
            5: self.delete_project,
        }

    def process_user_selections(self) -> None:
        """Show the menu and act on selections until the user enters a blank line."""
        done = False
        while not done:
            try:
                selection = self.get_user_selection()
                if selection is None:
                    done = self.exit_menu()
                    continue
                action = self._actions.get(selection)
                if action is None:
                    self.output(f"\n{selection} is not a valid selection. Try again.")
                    continue
                action()
            except EOFError:
                done = self.exit_menu()
            except Exception as e:
                self.logger.error(f"Menu operation failed: {e}")
                if isinstance(e, DbError):
                    capture_exception(e)
                self.output(f"\nError: {e} Try again.")

    def exit_menu(self) -> bool:
        self.output("\nExiting the menu.")
        return True

    # ------------- Operations -------------

    def create_project(self) -> None:
        project_name = self.get_string_input("Enter the project name")
        estimated_hours = self.get_decimal_input("Enter the estimated hours")
        actual_hours = self.get_decimal_input("Enter the actual hours")
        difficulty = self.get_int_input("Enter the project difficulty (1-5)")
        notes = self.get_string_input("Enter the project notes")

        project = Project(
            project_name=project_name,
            estimated_hours=estimated_hours,
            actual_hours=actual_hours,
            difficulty=difficulty,
            notes=notes,
        )
        db_project = self.service.add_project(project)
        self.output(f"You have successfully created project: {db_project}")

    def list_projects(self) -> None:
        projects = self.service.fetch_all_projects()
        self.output("\nProjects:")
        for project in projects:
            self.output(f"   {project.project_id}: {project.project_name}")

    def select_project(self) -> None:
        self.list_projects()
        project_id = self.get_int_input("Enter a project ID to select a project")

        # Unselect first so a failed lookup leaves nothing selected
        self.cur_project = None
        self.cur_project = self.service.fetch_project_by_id(project_id)

    def update_project_details(self) -> None:
        if self.cur_project is None:
            self.output("\nPlease select a project.")
            return
        cur = self.cur_project

        project_name = self.get_string_input(f"Enter the project name [{cur.project_name}]")
        estimated_hours = self.get_decimal_input(
            f"Enter the estimated hours [{cur.estimated_hours}]"
        )
        actual_hours = self.get_decimal_input(f"Enter the actual hours [{cur.actual_hours}]")
        difficulty = self.get_int_input(f"Enter the project difficulty (1-5) [{cur.difficulty}]")
        notes = self.get_string_input(f"Enter the project notes [{cur.notes}]")

        project = Project(
            project_id=cur.project_id,
            project_name=cur.project_name if project_name is None else project_name,
            estimated_hours=cur.estimated_hours if estimated_hours is None else estimated_hours,
            actual_hours=cur.actual_hours if actual_hours is None else actual_hours,
            difficulty=cur.difficulty if difficulty is None else difficulty,
            notes=cur.notes if notes is None else notes,
        )
        self.service.modify_project_details(project)
        self.cur_project = self.service.fetch_project_by_id(cur.project_id)

    def delete_project(self) -> None:
        self.list_projects()
        project_id = self.get_int_input("Enter the ID of the project to delete")

        self.service.delete_project(project_id)
        self.output(f"Project {project_id} was deleted successfully.")

        if self.cur_project is not None and self.cur_project.project_id == project_id:
            self.cur_project = None

    # ------------- Input helpers -------------

    def get_user_selection(self) -> int | None:
        self.print_operations()
        return self.get_int_input("Enter a menu selection")

    def print_operations(self) -> None:
        self.output("\nThese are the available selections. Press the Enter key to quit:")
        for line in OPERATIONS:
            self.output(f"   {line}")
        if self.cur_project is None:
            self.output("\nYou are not working with a project.")
        else:
            self.output(f"\nYou are working with project: {self.cur_project}")

    def get_string_input(self, prompt: str) -> str | None:
        """Prompt for a line; blank input means None."""
        value = self.input_func(f"{prompt}: ")
        return value.strip() or None

    def get_int_input(self, prompt: str) -> int | None:
        value = self.get_string_input(prompt)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError as e:
            raise InvalidInputError(f"{value} is not a valid number.") from e

    def get_decimal_input(self, prompt: str) -> Decimal | None:
        """Read a two-place amount; extra precision is rejected, never rounded."""
        value = self.get_string_input(prompt)
        if value is None:
            return None
        try:
            amount = to_fixed_point(value)
        except InvalidOperation as e:
            raise InvalidInputError(f"{value} is not a valid decimal number.") from e
        if amount != Decimal(value):
            raise InvalidInputError(f"{value} has more than two decimal places.")
        return amount
