"""Form validation, text layout and presupuesto PDF generation.

Key exports:
    QuoteForm                user input for one presupuesto
    validate_form()          required-field check (raises MissingFields)
    wrap_lines()             wrapped sub-lines + total height for a block
    compose_presupuesto()    render the fixed template to PDF bytes
    GenerationSession        validate → compose → preview/finalize
"""
