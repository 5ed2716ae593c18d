"""Step definitions for the voting and comments feature."""
import asyncio

from behave import then, when

from ideahub.models import VoteType
from ideahub.store import Select
from ideahub.views import render_idea_card


def stored_idea(context, title):
    rows = asyncio.run(context.store.inner.select(
        Select(table="ideas", filters={"id": context.ideas_by_title[title]})
    ))
    return rows[0]


@when('I vote {direction} on "{title}" {times:d} times')
def step_vote_times(context, direction, title, times):
    idea_id = context.ideas_by_title[title]

    async def vote():
        for _ in range(times):
            await context.dashboard.handle_vote(idea_id, VoteType(direction))

    asyncio.run(vote())


@when('"{name}" votes {direction} on "{title}"')
def step_other_employee_votes(context, name, direction, title):
    dashboard = context.dashboards[name]
    result = asyncio.run(dashboard.handle_vote(context.ideas_by_title[title], VoteType(direction)))
    assert result.ok


@then('"{title}" has {votes:d} votes')
def step_idea_has_votes(context, title, votes):
    assert stored_idea(context, title)["votes"] == votes


@then('{count:d} vote rows exist for "{title}"')
def step_vote_rows_exist(context, count, title):
    rows = asyncio.run(context.store.inner.select(
        Select(table="votes", filters={"idea_id": context.ideas_by_title[title]})
    ))
    assert len(rows) == count


@when('I click comments on "{title}"')
def step_click_comments(context, title):
    context.dashboard.handle_comment(context.ideas_by_title[title])
    assert context.dashboard.comment_target == context.ideas_by_title[title]


@when('I post the comment "{content}"')
def step_post_comment(context, content):
    posted = asyncio.run(context.dashboard.submit_comment(context.dashboard.comment_target, content))
    assert posted


@then('"{title}" shows {count:d} comments')
def step_idea_shows_comments(context, title, count):
    asyncio.run(context.dashboard.load())
    idea = next(idea for idea in context.dashboard.ideas if idea.title == title)
    assert f"{count} comments" in render_idea_card(idea)

