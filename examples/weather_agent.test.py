"""Example agent tests.

Run from the repository root:

    agent-test "examples/*.test.py"
    agent-test "examples/*.test.py" --watch --reporter verbose
"""

import asyncio

from agent_test import AgentResult, AgentRunner, ToolCall, test

FORECASTS = {"tokyo": "sunny, 21C", "oslo": "snow, -4C"}


async def weather_agent(prompt: str) -> AgentResult:
    """Toy agent: looks up a city mentioned in the prompt."""
    await asyncio.sleep(0.01)
    for city, forecast in FORECASTS.items():
        if city in prompt.lower():
            call = ToolCall(name="get_weather", arguments={"city": city}, output=forecast)
            return AgentResult(output=f"The weather in {city.title()} is {forecast}.", tool_calls=[call])
    return AgentResult(output="Which city do you mean?")


@test("reports the forecast for a known city")
async def _():
    result = await AgentRunner(weather_agent).run("Weather in Tokyo?", timeout_ms=1000)
    assert "sunny" in result.output


@test("calls the weather tool once")
async def _():
    result = await AgentRunner(weather_agent).run("How cold is Oslo today?")
    assert [c.name for c in result.tool_calls] == ["get_weather"]
    assert result.tool_calls[0].arguments == {"city": "oslo"}


@test("asks for clarification without a city")
async def _():
    runner = AgentRunner(weather_agent)
    result = await runner.run("Will it rain?")
    assert result.tool_calls == []
    assert runner.get_trace().duration_ms == result.duration_ms
