"""Persona prompt and canned replies for the chat relay."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termfolio.terminal.portfolio import PortfolioProfile

PERSONA_PROMPT = """\
You are an AI assistant representing {name}'s portfolio terminal. Here's context about {first_name}:

Profile:
- {role}
- Location: {location}
{bio}

Technical Skills:
Languages: {languages}
Libraries: {libraries}
Data Tools: {datatools}
Databases: {databases}
Frameworks: {frameworks}
APIs: {apis}
Concepts: {concepts}
Tools: {tools}

Featured Projects:
{projects}

Experience:
{experience}

Education:
{education}

Certifications: {certifications}

Contact:
- Email: {email}
- GitHub: {github}
- LinkedIn: {linkedin}
- Instagram: {instagram}

Response Guidelines:
- Keep responses conversational but professional
- Use data/analytics focused examples when relevant
- Reference specific skills/projects when relevant to the question
- If asked about topics outside your expertise, acknowledge limitations but stay helpful
- Encourage exploration of the portfolio commands (about, skills, projects, experience, education, contact)
- Keep responses concise but informative (aim for 2-6 lines typically)
"""

DEMO_MODE_RESPONSE = """\
🤖 AI Assistant (Demo Mode)

I'm currently running in demo mode since the Groq API key isn't configured yet.

Based on your question: "{message}"

Here's what I can tell you:

• I'm a passionate data analyst with expertise in Python, SQL, and machine learning
• I love building interactive data experiences like this terminal portfolio
• I have experience with modern analytics tools and AI APIs
• I'm always excited to discuss data science and analytical projects

To enable full AI functionality:
1. Set up a Groq API key in environment variables
2. The AI will then provide personalized, context-aware responses

For now, try these commands to learn more:
• about - My background and experience
• skills - Technical expertise
• projects - Featured work
• contact - Get in touch directly"""

UNAVAILABLE_RESPONSE = """\
🤖 AI temporarily unavailable

Sorry, I'm having trouble connecting to my AI brain right now.

While I get that sorted out, you can still explore:
• about - Learn about my background
• skills - View my technical expertise
• projects - Check out my featured work
• contact - Get in touch directly

Please try your AI question again in a moment!"""

ERROR_RESPONSE = """\
🤖 Oops! Something went wrong

I encountered an error while processing your question.

In the meantime, you can explore my portfolio using:
• about - My background and experience
• skills - Technical skills and expertise
• projects - Featured projects and work
• contact - Ways to get in touch

Please try asking again, or feel free to use the other commands!"""

REPLY_PREFIX = "🤖 "


def format_demo_response(message: str) -> str:
    return DEMO_MODE_RESPONSE.format(message=message)


def format_persona_prompt(profile: PortfolioProfile) -> str:
    about = profile.about
    skills = profile.skills
    projects = "\n".join(
        f"{index}. {project.name} - {project.description} ({', '.join(project.tech)})"
        for index, project in enumerate(profile.projects, start=1)
    )
    experience = "\n".join(
        f"- {exp.company} - {exp.position} ({exp.duration})" for exp in profile.experience
    )
    education = "\n".join(
        f"- {edu.degree}, {edu.institution} ({edu.status or 'Completed'})"
        for edu in profile.education
    )
    bio = "\n".join(f"- {paragraph.strip()}" for paragraph in about.bio.split("\n\n") if paragraph.strip())

    return PERSONA_PROMPT.format(
        name=about.name,
        first_name=about.name.split()[0],
        role=about.role,
        location=profile.contact.location,
        bio=bio,
        languages=", ".join(skills.languages),
        libraries=", ".join(skills.libraries),
        datatools=", ".join(skills.datatools),
        databases=", ".join(skills.databases),
        frameworks=", ".join(skills.frameworks),
        apis=", ".join(skills.apis),
        concepts=", ".join(skills.concepts),
        tools=", ".join(skills.tools),
        projects=projects,
        experience=experience,
        education=education,
        certifications=", ".join(profile.certifications),
        email=profile.contact.email,
        github=profile.contact.github,
        linkedin=profile.contact.linkedin,
        instagram=profile.contact.instagram,
    )
