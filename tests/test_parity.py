"""
测试 HTML 与 Word 的结构一致性（分区、题号、选项字母）
"""

import re
from io import BytesIO

import lxml.html
import pytest
from docx import Document

from examprint.models import Paper
from examprint.render import DocxRenderer, render_paper_html

MARKS_SUFFIX = re.compile(r" \(Marks per Question: [^)]*\)$")
QUESTION = re.compile(r"^(\d+)\. ")
OPTION = re.compile(r"^([a-z])\) ")


def structure_from_html(paper):
    tree = lxml.html.document_fromstring(render_paper_html(paper))
    result = []
    for section in tree.xpath("//section"):
        title = section.xpath('.//span[@class="section-title"]')[0].text_content()
        for question in section.xpath('.//div[@class="question"]'):
            number = int(question.xpath('.//strong[@class="q-num"]')[0].text_content().rstrip("."))
            letters = [l.text_content().strip("()") for l in question.xpath('.//span[@class="opt-label"]')]
            result.append((title, number, letters))
    return result


def structure_from_docx(paper):
    doc = Document(BytesIO(DocxRenderer().render(paper)))
    result = []
    title = None
    for para in doc.paragraphs:
        if para.style.name.startswith("Heading"):
            title = MARKS_SUFFIX.sub("", para.text)
        elif title is not None and para.runs and para.runs[0].bold and QUESTION.match(para.text):
            result.append((title, int(QUESTION.match(para.text).group(1)), []))
        elif result and OPTION.match(para.text):
            result[-1][2].append(OPTION.match(para.text).group(1))
    return result


def test_sample_paper_parity(paper):
    html_structure = structure_from_html(paper)
    assert html_structure == structure_from_docx(paper)
    assert html_structure[0] == ("Section A", 1, ["a", "b", "c", "d"])
    assert html_structure[-1] == ("Section C", 1, [])


@pytest.mark.parametrize("sections", [
    [],
    [{"title": "Only", "questions": []}],
    [{"title": "Mixed", "questions": [
        {"text": f"q{i}", "type": "mcq" if i % 2 else "other", "options": [{"text": str(j)} for j in range(i)]}
        for i in range(8)
    ]}],
    [{"title": "S1", "questions": [{"text": "1. tricky", "type": "mcq", "options": [{"text": "a) looks like a label"}]}]},
     {"title": "S2", "marksPerQuestion": 2, "questions": [{"text": "x", "type": "assertionreason", "assertion": "1. no", "reason": "b) no"}]}],
])
def test_parity_for_varied_papers(sections):
    paper = Paper.model_validate({"examTitle": "Parity", "sections": sections})
    assert structure_from_html(paper) == structure_from_docx(paper)
