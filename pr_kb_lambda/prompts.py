"""
Prompt Templates
----------------
One template per deployment variant. Each takes a RequestRecord and returns
the prompt text sent to the knowledge base.
"""

from .models import RequestRecord


def build_codebase_prompt(record: RequestRecord) -> str:
    return f"""
You are a helpful assistant that can answer questions about the codebase.
You are given a repository, a pull request number, and a diff.
You need to generate test cases that what can break because of these changes.
this is the repository: {record.repository}
this is the diff: {record.diff or ""}
"""


TEST_CASE_EXAMPLE = """
Test Case 1: Login with valid credentials
Preconditions: App is installed and the user has a registered account
Steps:
1. Launch the app
2. Tap the "Login" button on the welcome screen
3. Enter a valid email and password
4. Tap "Submit"
Expected Result: The user lands on the home screen and sees their name in the header
Priority: High
"""


def build_test_case_prompt(record: RequestRecord) -> str:
    return f"""
You are a senior QA engineer for a mobile application.
You are given a repository, a pull request description, and a diff.
Using the knowledge base to understand the app's screens and user flows,
write manual test cases that a tester can follow on a real device to verify
this change and catch anything it could break.

Repository: {record.repository}
Pull request #{record.pr_number}
Pull request description:
{record.pr_description}

Diff:
{record.diff or ""}

Instructions:
- Write at least 20 test cases.
- Cover the changed behaviour first, then regressions in related screens.
- Include negative cases (invalid input, no network, permission denied).
- Describe every step as a user action in the app, not as code.
- Use exactly the format of the example below for every test case.

Example format:
{TEST_CASE_EXAMPLE}
"""
