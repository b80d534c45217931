#!/usr/bin/env python3
"""MCP Server for FIRE Planner.

This server exposes the FIRE planning calculations as MCP tools,
allowing AI assistants to answer questions about a user's path to
financial independence.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools


# stdout carries the protocol, so logs go to stderr
logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger(__name__)

# Create the MCP server
server = Server("fire-planner")

# Global tools instance (initialized on startup)
tools: Optional[MultiProgramTools] = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via FIRE_PLANNER_PROGRAM env var
        default_program = os.environ.get('FIRE_PLANNER_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
        logger.info("Loaded programs: %s", list(tools.programs.keys()))
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}

NO_PARAMS = {
    "type": "object",
    "properties": {},
    "required": []
}

PROGRAM_ONLY = {
    "type": "object",
    "properties": {
        "program": PROGRAM_PARAM
    },
    "required": []
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available FIRE planning tools."""
    return [
        Tool(
            name="list_programs",
            description="List all available FIRE planning programs. Use this to see which programs are available and their basic info.",
            inputSchema=NO_PARAMS
        ),
        Tool(
            name="reload_programs",
            description="Reload all programs from disk. Use this after adding, modifying, or removing program spec.json files to refresh the cache without restarting the server.",
            inputSchema=NO_PARAMS
        ),
        Tool(
            name="get_program_overview",
            description="Get an overview of the plan: projection horizon, return and inflation assumptions, tax profile, final wealth and FIRE stats. Use this first to understand the plan.",
            inputSchema=PROGRAM_ONLY
        ),
        Tool(
            name="get_projection",
            description="Get the year-by-year wealth projection (wealth, expenses, FIRE number, FIRE reached) for one year or all years.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: calendar year. If omitted, returns all years."
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_scenarios",
            description="Get bear (-2% return), base and bull (+2% return) projections and their final wealth.",
            inputSchema=PROGRAM_ONLY
        ),
        Tool(
            name="get_fire_stats",
            description="Get the FIRE year, age at FIRE and years to FIRE (first year wealth reaches 25x expenses).",
            inputSchema=PROGRAM_ONLY
        ),
        Tool(
            name="calculate_country_tax",
            description="Calculate income tax, social contributions and take-home pay with a country's progressive brackets (Germany, United States, United Kingdom, Switzerland).",
            inputSchema={
                "type": "object",
                "properties": {
                    "gross_income": {"type": "number", "description": "Annual gross income"},
                    "country": {"type": "string", "description": "Country name or code, e.g. 'Germany' or 'US'"},
                    "married": {"type": "boolean", "description": "Use married brackets where available"}
                },
                "required": ["gross_income", "country"]
            }
        ),
        Tool(
            name="calculate_german_tax",
            description="Detailed German tax calculation: income tax with splitting, solidarity surcharge, church tax, pension/health/unemployment/care insurance, Kindergeld and net income, annual and monthly.",
            inputSchema={
                "type": "object",
                "properties": {
                    "gross_income": {"type": "number", "description": "Annual gross income in EUR"},
                    "married": {"type": "boolean", "description": "Joint filing (Ehegattensplitting)"},
                    "church_tax": {"type": "boolean", "description": "Liable for church tax"},
                    "state": {"type": "string", "description": "Federal state, e.g. 'Bayern' (8% church tax) or 'Berlin' (9%)"},
                    "children": {"type": "integer", "description": "Number of children"}
                },
                "required": ["gross_income"]
            }
        ),
        Tool(
            name="estimate_german_income_tax",
            description="Quick German tax estimate with Grundfreibetrag and Kinderfreibetrag deducted up front, including a zone-by-zone breakdown, plus a one-line flat-segment estimate of income tax with solidarity surcharge.",
            inputSchema={
                "type": "object",
                "properties": {
                    "gross_income": {"type": "number", "description": "Annual gross income in EUR"},
                    "married": {"type": "boolean", "description": "Joint filing"},
                    "children": {"type": "integer", "description": "Number of children"},
                    "church_tax": {"type": "boolean", "description": "Apply 8% church tax"},
                    "age": {"type": "integer", "description": "Age (childless care surcharge applies from 23)"}
                },
                "required": ["gross_income"]
            }
        ),
        Tool(
            name="get_lifestyle_basket",
            description="Get the lifestyle basket: future cost and required monthly savings per item, weighted inflation, and the truth gap against 2% CPI.",
            inputSchema=PROGRAM_ONLY
        ),
        Tool(
            name="get_financial_health",
            description="Get the financial health score out of 100 (savings rate, emergency fund, diversification, debt ratio, goal progress, lifestyle inflation) with status, percentile and priority actions, plus net worth, liquidity and per-person net worth.",
            inputSchema=PROGRAM_ONLY
        ),
        Tool(
            name="calculate_future_cost",
            description="Calculate the future cost of an item growing at its own inflation rate and the monthly savings needed to cover the increase.",
            inputSchema={
                "type": "object",
                "properties": {
                    "current_cost": {"type": "number", "description": "Cost today"},
                    "inflation_rate": {"type": "number", "description": "Annual inflation rate as a fraction, e.g. 0.05"},
                    "years": {"type": "integer", "description": "Years until the purchase"}
                },
                "required": ["current_cost", "inflation_rate", "years"]
            }
        ),
        Tool(
            name="get_investment_projection",
            description="Get the investment portfolio projection (monthly compounding with growing contributions) for one year offset or a summary of all years.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: year offset from today (0 = starting amount). If omitted, returns the summary."
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="search_projection_data",
            description="Search projection metrics by keyword, e.g. 'wealth in 2040' or 'FIRE number'.",
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Query about projection data, e.g. 'wealth', 'expenses', 'FIRE number'"
                    },
                    "year": {
                        "type": "integer",
                        "description": "Optional: specific year to search in"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": ["query"]
            }
        ),
        Tool(
            name="compare_programs",
            description="Compare two programs on final wealth, years to FIRE, scenario outcomes, expenses and investment balance, with a recommendation.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program1": {
                        "type": "string",
                        "description": "First program name to compare"
                    },
                    "program2": {
                        "type": "string",
                        "description": "Second program name to compare"
                    },
                    "metrics": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Optional: metrics to compare. Options: 'final_wealth', 'years_to_fire', 'bear_final_wealth', 'bull_final_wealth', 'final_expenses', 'investment_balance'. If not specified, compares all metrics."
                    }
                },
                "required": ["program1", "program2"]
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        fp_tools = get_tools()
        program = arguments.get("program")

        if name == "list_programs":
            result = fp_tools.list_programs()
        elif name == "reload_programs":
            result = fp_tools.reload_programs()
        elif name == "get_program_overview":
            result = fp_tools.get_program_overview(program)
        elif name == "get_projection":
            result = fp_tools.get_projection(arguments.get("year"), program)
        elif name == "get_scenarios":
            result = fp_tools.get_scenarios(program)
        elif name == "get_fire_stats":
            result = fp_tools.get_fire_stats(program)
        elif name == "calculate_country_tax":
            result = fp_tools.calculate_country_tax(
                arguments["gross_income"],
                arguments["country"],
                arguments.get("married", False)
            )
        elif name == "calculate_german_tax":
            result = fp_tools.calculate_german_tax(
                arguments["gross_income"],
                arguments.get("married", False),
                arguments.get("church_tax", False),
                arguments.get("state", "Bayern"),
                arguments.get("children", 0)
            )
        elif name == "estimate_german_income_tax":
            result = fp_tools.estimate_german_income_tax(
                arguments["gross_income"],
                arguments.get("married", False),
                arguments.get("children", 0),
                arguments.get("church_tax", False),
                arguments.get("age", 30)
            )
        elif name == "get_lifestyle_basket":
            result = fp_tools.get_lifestyle_basket(program)
        elif name == "get_financial_health":
            result = fp_tools.get_financial_health(program)
        elif name == "calculate_future_cost":
            result = fp_tools.calculate_future_cost(
                arguments["current_cost"],
                arguments["inflation_rate"],
                arguments["years"]
            )
        elif name == "get_investment_projection":
            result = fp_tools.get_investment_projection(arguments.get("year"), program)
        elif name == "search_projection_data":
            result = fp_tools.search_projection_data(
                arguments["query"],
                arguments.get("year"),
                program
            )
        elif name == "compare_programs":
            result = fp_tools.compare_programs(
                arguments["program1"],
                arguments["program2"],
                arguments.get("metrics")
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        logger.exception("Tool '%s' failed", name)
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
