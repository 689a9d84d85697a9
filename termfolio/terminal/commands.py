"""Command registry: names and aliases mapped to output handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from termfolio.terminal.portfolio import PortfolioProfile

RULE = "━" * 46


class Sentinel(str, Enum):
    """Reserved handler results that the terminal acts on instead of printing."""

    CLEAR_SCREEN = "CLEAR_SCREEN"
    SNAKE_GAME_START = "SNAKE_GAME_START"
    PYTHON_COMPILER_START = "PYTHON_COMPILER_START"
    TOGGLE_THEME = "TOGGLE_THEME"
    SCRAPE_URL = "SCRAPE_URL"


SCRAPE_URL_PREFIX = f"{Sentinel.SCRAPE_URL.value}:"


def parse_sentinel(output: str) -> tuple[Sentinel, str | None] | None:
    """Return ``(sentinel, argument)`` when *output* is a control value."""
    if output.startswith(SCRAPE_URL_PREFIX):
        return Sentinel.SCRAPE_URL, output[len(SCRAPE_URL_PREFIX):]
    try:
        sentinel = Sentinel(output)
    except ValueError:
        return None
    if sentinel is Sentinel.SCRAPE_URL:
        return None
    return sentinel, None


@dataclass(frozen=True)
class Command:
    name: str
    description: str
    handler: Callable[[], str]
    aliases: tuple[str, ...] = ()


class CommandRegistry:
    """Case-insensitive lookup over registered commands and their aliases."""

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._index: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        """Add *command*; a name or alias already taken raises ``ValueError``."""
        keys = [command.name.lower(), *(alias.lower() for alias in command.aliases)]
        for key in keys:
            if key in self._index:
                raise ValueError(
                    f"{key!r} is already registered to {self._index[key].name!r}"
                )
        self._commands.append(command)
        for key in keys:
            self._index[key] = command

    def get(self, name: str) -> Command | None:
        return self._index.get(name.lower())

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._index

    def __iter__(self):
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)


def _bullets(items: list[str], indent: str = "  ") -> str:
    return f"\n{indent}".join(f"• {item}" for item in items)


def _help() -> str:
    return """Available Commands:

📋 Portfolio Commands:
  about        - Learn about me and my background
  skills       - View my technical skills and expertise
  projects     - Explore my featured projects
  experience   - View my work experience
  education    - See my educational background
  certifications - View my certifications
  resume       - View my resume highlights
  contact      - Get my contact information

🤖 AI & Interactive Commands:
  chat         - Start AI conversation (Groq AI powered)
  ask <msg>    - Ask me anything via AI
  snake        - Play snake game
  python       - Python code compiler
  scrape <url> - Web scraper tool

🛠️ System Commands:
  clear        - Clear the terminal screen
  theme        - Toggle light/dark theme
  help         - Show this help message
  exit         - Refresh the session

💡 Tips:
  - Use ↑/↓ arrow keys to navigate command history
  - Try "ask me about my data analysis experience"
  - Use "contact linkedin" for direct social media access"""


def _about(profile: PortfolioProfile) -> str:
    about = profile.about
    return f"""About Me

{about.name}
{about.role}
{about.location}
{about.phone}  {about.email}

Professional Summary:
{about.bio}

Type 'skills' to see my technical expertise
Type 'projects' to explore my work
Type 'contact' to get in touch!"""


def _skills(profile: PortfolioProfile) -> str:
    skills = profile.skills
    sections = [
        ("Languages", skills.languages),
        ("Libraries", skills.libraries),
        ("Data Tools", skills.datatools),
        ("Databases", skills.databases),
        ("Frameworks", skills.frameworks),
        ("APIs", skills.apis),
        ("Concepts", skills.concepts),
        ("Version Control", skills.tools),
    ]
    body = "\n\n".join(f"{title}:\n  {_bullets(items)}" for title, items in sections)
    return f"""Technical Skills

{body}

Ask me about any of these technologies!
Try: "ask tell me about your Python experience\""""


def _projects(profile: PortfolioProfile) -> str:
    entries = []
    for index, project in enumerate(profile.projects):
        separator = f"\n{RULE}\n" if index > 0 else ""
        entries.append(
            f"""{separator}
{index + 1}. 📦 {project.name} {project.status}
   {project.description}
   🔧 Tech Stack: {", ".join(project.tech)}
   📝 Details: {project.details or "More details available on request"}"""
        )
    closing = ""
    if profile.projects:
        closing = f'\n\nWant to know more about any project?\nTry: "ask tell me more about the {profile.projects[0].name}"'
    return f"Featured Projects\n{RULE}\n" + "\n".join(entries) + closing


def _experience(profile: PortfolioProfile) -> str:
    entries = "\n".join(
        f"""{exp.company}
{exp.position} | {exp.duration}

Key Responsibilities:
{exp.description}
"""
        for exp in profile.experience
    )
    return f"""Work Experience

{entries}
For more details, try: "ask about my work experience\""""


def _education(profile: PortfolioProfile) -> str:
    entries = "\n".join(
        f"""{edu.institution}
{edu.degree} | {edu.year}
Status: {edu.status or "Completed"}
"""
        for edu in profile.education
    )
    return f"""Education

{entries}
For more academic details, try: "ask about my education\""""


def _certifications(profile: PortfolioProfile) -> str:
    return f"""Certifications

{_bullets(profile.certifications, indent="")}

These certifications validate my expertise in data analytics and cloud technologies.
Try: "ask about my certification journey\""""


def _resume(profile: PortfolioProfile) -> str:
    highlights = [
        f"{exp.position} at {exp.company} ({exp.duration})" for exp in profile.experience
    ]
    highlights.append(f"Skilled in {', '.join(profile.skills.languages)} and data analytics")
    highlights.extend(f"{project.name} {project.status}" for project in profile.projects)
    return f"""Resume Highlights
{RULE}

{profile.about.name} | {profile.about.role}
{profile.contact.location} | {profile.contact.email}

{_bullets(highlights, indent="")}

For the full story, try: 'experience', 'skills' and 'projects'"""


def _contact(profile: PortfolioProfile) -> str:
    contact = profile.contact
    return f"""Contact Information

📧 Email:     {contact.email}
📞 Phone:     {contact.phone}
📍 Location:  {contact.location}
🐙 GitHub:    {contact.github}
💼 LinkedIn:  {contact.linkedin}
📸 Instagram: {contact.instagram}

Feel free to reach out! I'm always interested in
discussing new opportunities, projects, or just
chatting about data analysis and technology.

Social Media Quick Access:
Type: "contact linkedin" or "contact github" or "contact insta"
Try: "ask what's the best way to contact you?\""""


def _exit() -> str:
    return f"""Goodbye! 👋
{RULE}

Thanks for exploring my terminal portfolio!

🔄 Refreshing session...
💡 Come back anytime!"""


def _chat() -> str:
    return f"""AI Chat Mode
{RULE}

🤖 AI Assistant activated!

You can now ask me anything about:
• My experience and skills
• Technical questions
• Project details
• Career advice
• Or just have a casual chat!

Usage:
  ask <your question>

Example:
  ask what programming languages do you prefer?
  ask tell me about your most challenging project
  ask what's your experience with Python?

💡 The AI has context about my portfolio and experience!"""


def _scrape_usage() -> str:
    return """Web Scraping Tool

Usage: scrape <url>

Examples:
  scrape https://jsonplaceholder.typicode.com/posts
  scrape https://api.github.com/users/octocat

Features:
• Extract data from websites and APIs
• Parse JSON responses automatically
• Export to CSV format with instant download
• Handle both HTML and JSON data sources

Download Options:
• Automatically saves a CSV file after scraping
• File named with current date: scraped_data_YYYY-MM-DD.csv
• Up to 100 records per scrape (performance optimized)

Try: "scrape https://jsonplaceholder.typicode.com/posts\""""


def _ask_usage() -> str:
    return """Ask Command Usage

Usage: ask <your question>

Examples:
  ask what technologies do you specialize in?
  ask tell me about your background
  ask what's your favorite project?
  ask how did you get into data analysis?

I'll use AI to give you personalized responses!"""


def build_default_registry(profile: PortfolioProfile) -> CommandRegistry:
    """Register every portfolio command, rendering content from *profile*."""
    registry = CommandRegistry()
    for command in (
        Command("help", "Show available commands", _help, ("h", "?")),
        Command("about", "Learn about me and my background", lambda: _about(profile), ("bio", "info")),
        Command("skills", "View my technical skills and expertise", lambda: _skills(profile), ("tech", "stack")),
        Command("projects", "Explore my featured projects", lambda: _projects(profile), ("work", "portfolio")),
        Command("experience", "View my work experience", lambda: _experience(profile), ("career",)),
        Command("education", "See my educational background", lambda: _education(profile), ("edu", "school")),
        Command(
            "certifications",
            "View my certifications",
            lambda: _certifications(profile),
            ("certs", "certificates"),
        ),
        Command("resume", "View my resume highlights", lambda: _resume(profile), ("cv",)),
        Command("contact", "Get my contact information", lambda: _contact(profile), ("reach", "connect")),
        Command("clear", "Clear the terminal screen", lambda: Sentinel.CLEAR_SCREEN.value, ("cls",)),
        Command("theme", "Toggle light/dark theme", lambda: Sentinel.TOGGLE_THEME.value),
        Command("exit", "Refresh the session", _exit, ("quit", "logout")),
        Command("chat", "Start AI conversation", _chat, ("ai",)),
        Command("snake", "Play snake game", lambda: Sentinel.SNAKE_GAME_START.value, ("game",)),
        Command("python", "Python code compiler", lambda: Sentinel.PYTHON_COMPILER_START.value, ("py", "code")),
        Command("scrape", "Web scraper tool", _scrape_usage, ("webscrape",)),
        Command("ask", "Ask me anything via AI", _ask_usage),
    ):
        registry.register(command)
    return registry
