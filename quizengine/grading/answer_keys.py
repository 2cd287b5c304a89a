"""
Known MCQ answer keys and content heuristics.

Answer keys map a lower-cased question-stem fragment to the correct letter.
Each subject's list is ordered; the first fragment contained in the question
wins. Content rules inspect option text for the term a correct answer would
carry (e.g. "newton" for the unit of force).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

AnswerKeyTable = Mapping[str, Sequence[tuple[str, str]]]

FALLBACK_SUBJECT = "biology"

BIOLOGY_KEYS: list[tuple[str, str]] = [
    ("which feature identifies the animal as a mammal", "C"),
    ("which characteristics of living things are demonstrated", "B"),
    ("which pair of animals have the most recent common ancestor", "C"),
    ("which level of organisation does the sample show", "D"),
    ("which arrow shows the direction of diffusion of carbon dioxide on a sunny day", "B"),
    ("which statement describes how the molecules will move", "A"),
    ("which element is found in proteins but not carbohydrates", "C"),
    ("which substances are used for photosynthesis", "B"),
    ("which term is defined as the taking of substances into the body through the mouth", "D"),
    ("which nutrient is deficient in the diet of a child with kwashiorkor", "C"),
    ("which is a description of translocation", "B"),
    ("which is a function of the lymphatic system", "C"),
    ("what is a common feature of both active and passive immunity", "D"),
    ("what are the products of anaerobic respiration in muscles", "D"),
    ("which substance remains in the blood as it passes through the kidney", "A"),
    ("which row shows the effects of increased adrenaline release", "D"),
    ("what is an advantage of asexual reproduction for a population of flowering plants", "B"),
    ("during sexual reproduction in plants, what will give rise to the greatest variation", "D"),
    ("which hormone is given to women undergoing fertility treatment", "B"),
    ("what is cell x", "B"),
    ("how many chromosomes does each of the resulting cells contain", "C"),
    ("which human phenotype is affected by environmental and genetic factors", "B"),
    ("which adaptation may be present in a xerophyte", "C"),
    ("what percentage of energy present in the producer is transferred to the secondary consumer", "C"),
    ("which process results in the loss of nitrates from soils", "C"),
    ("which characteristic applies to all forms of life", "B"),
    ("what does this indicate about these animals", "D"),
    ("which features does spirogyra share with plant cells", "A"),
    ("when a food substance is tested with iodine solution, which colour shows the presence of starch", "A"),
    ("what type of cell is found in layer x", "A"),
    ("which molecule contains magnesium", "A"),
    ("in which part of the body of a mammal does mechanical digestion occur", "C"),
    ("what is an advantage of a double circulatory system in mammals", "D"),
    ("in this reflex action, what is the effector", "C"),
    ("which description of how the pupil of the eye gets smaller is correct", "B"),
    ("a wind-pollinated plant has which features", "C"),
    ("which describes a human male gamete", "C"),
    ("which sex chromosomes in the egg and the sperm will produce a male child", "B"),
    ("which feature helps a xerophyte survive in its environment", "D"),
    ("which stage in the treatment of sewage removes large floating objects", "C"),
    ("what other four processes must organism x carry out to stay alive", "D"),
    ("what is a correct way of naming a species using the binomial system", "A"),
    ("what is structure x", "C"),
    ("which process can be carried out by only one of these cells", "C"),
    ("the root hair and the xylem are part of the same", "D"),
    ("when a frog is swimming in pond water, in which directions will there be a net diffusion", "C"),
    ("which process only involves the movement of water through the partially permeable membrane", "C"),
    ("which statement about biological molecules is correct", "A"),
    ("what would reduce the rate of production of amino acids", "B"),
    ("which is the substrate", "A"),
    ("which characteristic do all living organisms show", "B"),
    ("using the binomial naming system, the arctic fox is called vulpes lagopus", "B"),
    ("what is a characteristic of both insects and arachnids", "B"),
    ("what structures can be found in both plant and animal cells", "D"),
    ("a test was performed on a food substance", "C"),
    ("which statements are correct", "A"),
    ("which problems can be caused by malnutrition", "A"),
]

CHEMISTRY_KEYS: list[tuple[str, str]] = [
    ("which statement about atoms is correct", "B"),
    ("what is the chemical formula for water", "A"),
    ("which gas is produced when metals react with acids", "C"),
    ("what is the ph of a neutral solution", "B"),
    ("which element has the symbol na", "B"),
    ("what is the atomic number of carbon", "B"),
    ("which type of bonding occurs in sodium chloride", "A"),
    ("what is produced when an acid reacts with a base", "C"),
    ("which gas turns limewater milky", "B"),
    ("what is the formula for methane", "A"),
    ("which metal is most reactive", "A"),
    ("what happens during oxidation", "B"),
    ("which indicator turns red in acid", "A"),
    ("what is the molecular formula for glucose", "C"),
    ("which process separates mixtures based on boiling points", "B"),
]

PHYSICS_KEYS: list[tuple[str, str]] = [
    ("what is the unit of force", "A"),
    ("which of the following is a vector quantity", "C"),
    ("what happens to the resistance of a wire when its length is doubled", "B"),
    ("which type of electromagnetic radiation has the highest frequency", "D"),
    ("what is the acceleration due to gravity on earth", "A"),
    ("what is the unit of energy", "B"),
    ("which law states that force equals mass times acceleration", "B"),
    ("what is the speed of light in a vacuum", "C"),
    ("which particle has no electric charge", "C"),
    ("what happens to the frequency of a wave when its wavelength increases", "A"),
    ("which type of current changes direction periodically", "B"),
    ("what is the unit of electric current", "A"),
    ("which material is the best conductor of electricity", "A"),
    ("what is the relationship between voltage, current, and resistance", "C"),
    ("which type of lens converges light rays", "A"),
]

DEFAULT_ANSWER_KEYS: dict[str, list[tuple[str, str]]] = {
    "biology": BIOLOGY_KEYS,
    "chemistry": CHEMISTRY_KEYS,
    "physics": PHYSICS_KEYS,
}


@dataclass(frozen=True)
class ContentRule:
    """
    Subject-specific heuristic.

    Fires when every term in question_terms appears in the lower-cased
    question. The answer is the first option whose text satisfies
    option_matches, or fallback_letter when none does.
    """

    subject: str
    question_terms: tuple[str, ...]
    option_matches: Callable[[str], bool]
    fallback_letter: str
    case_sensitive_options: bool = False

    def applies_to(self, question_lower: str) -> bool:
        return all(term in question_lower for term in self.question_terms)


def _contains_any(*terms: str) -> Callable[[str], bool]:
    return lambda text: any(term in text for term in terms)


def _contains_all(*terms: str) -> Callable[[str], bool]:
    return lambda text: all(term in text for term in terms)


DEFAULT_CONTENT_RULES: list[ContentRule] = [
    # Biology
    ContentRule("biology", ("mammal", "feature"), _contains_any("fur", "hair"), "C"),
    ContentRule("biology", ("photosynthesis", "substances"), _contains_all("carbon dioxide", "water"), "B"),
    ContentRule("biology", ("protein", "element"), _contains_any("nitrogen"), "C"),
    # Chemistry
    ContentRule("chemistry", ("water", "formula"), _contains_any("h2o"), "A"),
    ContentRule("chemistry", ("neutral", "ph"), _contains_any("7"), "B", case_sensitive_options=True),
    ContentRule("chemistry", ("metals", "acids", "gas"), _contains_any("hydrogen"), "C"),
    # Physics
    ContentRule("physics", ("force", "unit"), _contains_any("newton"), "A"),
    ContentRule("physics", ("vector",), _contains_any("velocity"), "C"),
    ContentRule("physics", ("gravity", "acceleration"), _contains_any("9.8"), "A", case_sensitive_options=True),
]
