"""Prompt generation for Cypress test batches."""

SYSTEM_PROMPT = (
    "You are an expert at writing Cypress tests for Koha, a library management system. "
    "You generate clean, working TypeScript code for Cypress tests."
)

INITIAL_INSTRUCTION = "Generate a complete Cypress test in TypeScript that automates these steps."

APPEND_INSTRUCTION = """\
Generate ONLY an it() test block (not the full describe structure) that will be appended \
to an existing test file.

CRITICAL REQUIREMENTS FOR APPENDED TESTS:
- Do NOT include describe(), beforeEach(), or afterEach() blocks
- Do NOT call cy.login() - login happens in the shared beforeEach
- Do NOT call cy.task('insertSamplePatron') or create ANY new test data
- MUST use function() syntax: it('test name', function() { ... })
- MUST access the existing patron via: const patron = this.objects_patron.patron;
- The patron data is ALREADY created and available in the this.objects_patron variable
- Just write the test steps using the existing patron - no setup needed"""

GUIDELINES = """\
Follow the patterns used in existing Koha Cypress tests.

IMPORTANT TEST APPROACH:
- Assume the patch is ALREADY APPLIED to the codebase
- Generate tests that verify the functionality WORKS CORRECTLY with the patch
- Do NOT create "before patch" tests that check for broken behavior
- If the test plan mentions "before" and "after" patch, ONLY implement the "after" scenario
- Find related classes and ID's from the Koha UI for selectors, avoiding general text selectors

CRITICAL - TEST PLAN ADHERENCE:
- ONLY test the exact steps specified in the test plan
- Do NOT add extra tests for functions or features not mentioned in the test plan
- Stay strictly within the scope of the provided test plan
- Do NOT add extra verification steps unless the test plan explicitly asks to verify
- If test plan says "click Save", just click Save - don't add verification afterward
- After completing last step in test plan, END immediately
- When test plan says "verify X has value Y", check for that EXACT value Y, not just existence
- When test plan specifies what to verify in a column/field, check that specific column/field

Requirements:
- Use TypeScript syntax
- Start with cy.login() in beforeEach
- Use SPECIFIC, UNIQUE selectors that target single elements \
(prefer IDs, then unique classes, then specific attributes)
- AVOID generic selectors that match multiple elements \
(e.g., 'button', 'input[type="submit"]' without additional specificity)
- If a selector might match multiple elements, add :first, :eq(0), or use .first() to target one
- Use .within() to scope selectors to specific containers when needed
- Combine selectors for uniqueness \
(e.g., '#formid button[type="submit"]' instead of just 'button')
- Include timeouts for elements that may take time to load
- Use descriptive test names that match the test plan steps
- Include comments for each major step from the test plan
- Handle async operations properly with cy.wait() or should assertions
- Use Koha-specific URL patterns (/cgi-bin/koha/...)

Koha Cypress Plugin Tasks (available via cy.task()):
- Database queries: cy.task('query', { sql: 'SELECT ...', params: [value1, value2] })
- Insert test data: cy.task('insertSampleBiblio', { item_count: 2 })
- Insert patron: cy.task('insertSamplePatron', { categorycode: 'PT' })
- Insert hold: cy.task('insertSampleHold', { biblionumber, borrowernumber })
- Insert checkout: cy.task('insertSampleCheckout', { itemnumber, borrowernumber })
- Build sample data: cy.task('buildSampleObjects', { patrons: 1, biblios: 1 })
- API calls: cy.task('apiGet', { endpoint: '/api/v1/patrons' })
- API calls: cy.task('apiPost', { endpoint: '/api/v1/patrons', body: {...} })
- API calls: cy.task('apiPut', { endpoint: '/api/v1/patrons/123', body: {...} })
- API calls: cy.task('apiDelete', { endpoint: '/api/v1/patrons/123' })
- Cleanup: cy.task('deleteSampleObjects', objects)

IMPORTANT - Variable Naming Convention:
- When accessing patron object from insertSamplePatron: use patron.patron_id (NOT borrowernumber)
- When accessing biblio object: use biblio.biblio_id (NOT biblionumber)
- When accessing item object: use item.item_id (NOT itemnumber)
- In URLs like /members/moremember.pl?borrowernumber=X, use patron.patron_id for the value
- Example: cy.visit(`/cgi-bin/koha/members/member-flags.pl?member=${patron.patron_id}`)

REAL Examples from Koha Cypress tests:

1. Basic test structure with data cleanup:
describe("Test name", () => {
    beforeEach(() => {
        cy.login();
        cy.title().should("eq", "Koha staff interface");
        cy.task("insertSamplePatron").then(objects_patron => {
            cy.wrap(objects_patron).as("objects_patron");
        });
    });

    afterEach(function () {
        cy.task("deleteSampleObjects", this.objects_patron);
    });

    it("should do something", function () {
        const patron = this.objects_patron.patron;
        cy.visit(`/cgi-bin/koha/members/moremember.pl?borrowernumber=${patron.patron_id}`);
        // test code
    });
});

2. Database query pattern:
cy.task('query', {
  sql: 'SELECT * FROM borrowers WHERE borrowernumber = ?',
  params: [patron_id]
}).then((result: any) => {
  expect(result).to.have.length(1);
});

3. Form interaction patterns:
cy.get("form.patron_search_form").within(() => {
    cy.get("#searchmember").type("search term");
    cy.get("input[type='submit']").click();
});

4. Visiting pages and waiting for elements:
cy.visit("/cgi-bin/koha/members/members-home.pl");
cy.get("#searchmember", { timeout: 10000 }).should("be.visible");

5. Verifying specific value in table column:
cy.get("#logst tbody tr").each(($row) => {
    cy.wrap($row).find("td").eq(3).then(($infoColumn) => {
        const infoText = $infoColumn.text().trim();
        if (infoText.includes("{catalogue: 1}")) {
            expect(infoText).to.contain("{catalogue: 1}");
        }
    });
});

IMPORTANT:
- Use 'query' NOT 'queryDb' for database tasks
- Use 'sql' and 'params' properties, NOT 'query' and 'values'
- Always type result as 'any' in .then((result: any) => ...)
- Database is already configured - no setup needed

Format the output as a complete TypeScript file that can be directly saved as a .ts file.
Start with the describe() block and include all necessary code.
Do not include markdown code fences or explanations, just the TypeScript code.

APPENDED TEST REQUIREMENTS (if generating additional it() blocks):
- Use function() syntax (not arrow functions) to access 'this' context
- Access shared test data via this.objects_patron, this.objects_biblio, etc.
- Do NOT call cy.task('insertSamplePatron') again - use existing data
- Do NOT include cy.login() - it's already in the shared beforeEach
"""


def build_prompt(
    plan_unit: str,
    bug_number: str,
    script_context: str = "",
    *,
    is_append: bool = False,
) -> str:
    """Generate the user prompt for one batch.

    Args:
        plan_unit: Step group text, or the whole plan
        bug_number: Bugzilla bug number the plan belongs to
        script_context: Advisory block of source excerpts (may be empty)
        is_append: True for batches after the first (single it() block)

    Returns:
        Formatted prompt for the generation backend
    """
    instruction = APPEND_INSTRUCTION if is_append else INITIAL_INSTRUCTION
    return f"""Given this Koha bug test plan for Bug {bug_number}:

{plan_unit}
{script_context}
{instruction}
{GUIDELINES}"""
